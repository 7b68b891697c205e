# filename: huffman_bits.py

import logging

from huffman_errors import FormatError, InternalConsistencyError

logger = logging.getLogger(__name__)


def pack_bits(data, codes):
    """Concatenate the code of every byte in data, most significant bit first.

    Returns (payload, bit_count). The last byte is zero-padded on its low
    bits when bit_count is not a multiple of 8.
    """
    table = {char: (int(code, 2), len(code)) for char, code in codes.items()}

    out = bytearray()
    acc = 0
    acc_bits = 0
    bit_count = 0
    for char in data:
        try:
            value, length = table[char]
        except KeyError as err:
            raise InternalConsistencyError(f"byte {char} has no code in the table") from err
        acc = (acc << length) | value
        acc_bits += length
        bit_count += length
        while acc_bits >= 8:
            acc_bits -= 8
            out.append((acc >> acc_bits) & 0xFF)
        acc &= (1 << acc_bits) - 1

    if acc_bits:
        out.append(acc << (8 - acc_bits))

    logger.debug("packed %d bytes into %d bits (%d bytes)", len(data), bit_count, len(out))
    return bytes(out), bit_count


def unpack_bits(payload, tree, symbol_count=None):
    """Walk payload bit by bit against tree and return the decoded bytes.

    With symbol_count, decoding stops after that many symbols; running out of
    payload first, or leaving whole bytes unread, is a FormatError. Without
    it every bit is consumed and a code left unfinished at the end is dropped.
    """
    nodes = tree.nodes
    root = tree.root
    out = bytearray()
    index = root

    for position, byte in enumerate(payload):
        if symbol_count is not None and len(out) == symbol_count:
            raise FormatError(f"{len(payload) - position} trailing byte(s) after the last symbol")
        for shift in range(7, -1, -1):
            node = nodes[index]
            index = node.right if (byte >> shift) & 1 else node.left
            if index is None:
                raise FormatError(f"bit {position * 8 + 7 - shift} of the payload leads outside the code tree")
            char = nodes[index].char
            if char is not None:
                out.append(char)
                index = root
                if symbol_count is not None and len(out) == symbol_count:
                    if byte & ((1 << shift) - 1):
                        raise FormatError("non-zero padding bits after the last symbol")
                    break

    if symbol_count is not None:
        if len(out) < symbol_count:
            raise FormatError(f"payload truncated: decoded {len(out)} of {symbol_count} symbols")
    elif index != root:
        logger.warning("payload ended in the middle of a code; trailing bits ignored")

    return bytes(out)
