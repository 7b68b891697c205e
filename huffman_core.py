# filename: huffman_core.py

import heapq
import itertools
import logging
from collections import Counter

from huffman_errors import EmptyInputError, FormatError

logger = logging.getLogger(__name__)


class HuffmanNode:
    def __init__(self, char=None, freq=0, left=None, right=None):
        # char is the byte value for leaves and None for internal nodes;
        # left and right are indexes into the owning HuffmanTree.
        self.char = char
        self.freq = freq
        self.left = left
        self.right = right

    @property
    def is_leaf(self):
        return self.char is not None

    def __repr__(self):
        return f"HuffmanNode(char={self.char!r}, freq={self.freq}, left={self.left}, right={self.right})"


class HuffmanTree:
    """Nodes stored in a flat list and linked by index.

    ``root`` is the index of the root node, or None for a tree that has not
    been populated yet.
    """

    def __init__(self):
        self.nodes = []
        self.root = None

    def add_node(self, char=None, freq=0, left=None, right=None):
        self.nodes.append(HuffmanNode(char, freq, left, right))
        return len(self.nodes) - 1

    def __getitem__(self, index):
        return self.nodes[index]

    def __len__(self):
        return len(self.nodes)

    def leaves(self):
        return [node for node in self.nodes if node.is_leaf]


class HuffmanLogic:
    def count_frequencies(self, data):
        # Frequency analysis of the input byte data
        return dict(Counter(data))

    def build_tree(self, freqs):
        if not freqs:
            raise EmptyInputError("cannot build a Huffman tree from an empty frequency table")

        tree = HuffmanTree()
        # Sequence numbers break frequency ties: leaves in byte order first,
        # then merged nodes in creation order.
        sequence = itertools.count()
        priority_queue = []
        for char in sorted(freqs):
            freq = freqs[char]
            if freq <= 0:
                raise ValueError(f"frequency of byte {char} must be positive, got {freq}")
            index = tree.add_node(char=char, freq=freq)
            priority_queue.append((freq, next(sequence), index))
        heapq.heapify(priority_queue)

        # Iteratively merge nodes to form the binary tree
        while len(priority_queue) > 1:
            left_freq, _, left = heapq.heappop(priority_queue)
            right_freq, _, right = heapq.heappop(priority_queue)
            merged = tree.add_node(freq=left_freq + right_freq, left=left, right=right)
            heapq.heappush(priority_queue, (left_freq + right_freq, next(sequence), merged))

        tree.root = priority_queue[0][2]
        logger.debug("built Huffman tree: %d leaves, %d nodes", len(freqs), len(tree))
        return tree

    def generate_codes(self, tree):
        if tree.root is None:
            raise EmptyInputError("cannot generate codes for an empty tree")

        root = tree[tree.root]
        if root.is_leaf:
            # A lone leaf would get the empty code; give it one bit instead.
            return {root.char: "0"}

        codes = {}
        self._collect_codes(tree, tree.root, "", codes)
        return codes

    def _collect_codes(self, tree, index, current_code, codes):
        node = tree[index]
        if node.is_leaf:
            codes[node.char] = current_code
            return
        self._collect_codes(tree, node.left, current_code + "0", codes)
        self._collect_codes(tree, node.right, current_code + "1", codes)

    def rebuild_tree(self, codes):
        """Rebuild a decoding tree from a code table.

        Raises FormatError when the table is not a complete prefix code. The
        one-entry table is the exception: its single code must be "0" and the
        root is left without a right child.
        """
        if not codes:
            raise FormatError("code table is empty")

        tree = HuffmanTree()
        tree.root = tree.add_node()

        if len(codes) == 1:
            (char, code), = codes.items()
            if code != "0":
                raise FormatError(f"single-symbol table must use code '0', got {code!r} for byte {char}")
            tree[tree.root].left = tree.add_node(char=char)
            return tree

        for char, code in sorted(codes.items()):
            self._insert_code(tree, char, code)

        for node in tree.nodes:
            if not node.is_leaf and (node.left is None or node.right is None):
                raise FormatError("code table is not a complete prefix code")
        return tree

    def _insert_code(self, tree, char, code):
        if not code or set(code) - {"0", "1"}:
            raise FormatError(f"invalid code {code!r} for byte {char}")

        index = tree.root
        last = len(code) - 1
        for depth, bit in enumerate(code):
            node = tree[index]
            if node.is_leaf:
                raise FormatError(f"code for byte {char} has the code of byte {node.char} as a prefix")
            branch = "right" if bit == "1" else "left"
            child = getattr(node, branch)
            if child is None:
                child = tree.add_node()
                setattr(node, branch, child)
            elif depth == last:
                raise FormatError(f"code for byte {char} is a prefix of, or equal to, another code")
            index = child
        tree[index].char = char
