# filename: huffman_service.py

import logging
from pathlib import Path

from huffman_bits import pack_bits, unpack_bits
from huffman_core import HuffmanLogic
from huffman_errors import EmptyInputError, FormatError, HuffmanIOError, InternalConsistencyError
from huffman_format import (
    decode_container,
    decode_legacy_container,
    encode_container,
    encode_legacy_container,
)

logger = logging.getLogger(__name__)

CONTAINERS = ("native", "legacy")


class HuffmanService:
    def __init__(self, container="native"):
        if container not in CONTAINERS:
            raise ValueError(f"unknown container {container!r}, expected one of {CONTAINERS}")
        self.container = container
        self.logic = HuffmanLogic()

    def compress(self, data):
        if not data:
            raise EmptyInputError("cannot compress empty input")

        freqs = self.logic.count_frequencies(data)
        tree = self.logic.build_tree(freqs)
        codes = self.logic.generate_codes(tree)
        payload, bit_count = pack_bits(data, codes)
        logger.debug(
            "compress: %d bytes, %d distinct, longest code %d bits, payload %d bits",
            len(data), len(codes), max(len(code) for code in codes.values()), bit_count,
        )

        if self.container == "legacy":
            return encode_legacy_container(codes, payload)
        return encode_container(codes, len(data), payload)

    def decompress(self, blob):
        if self.container == "legacy":
            codes, payload = decode_legacy_container(blob)
            symbol_count = None
        else:
            codes, symbol_count, payload = decode_container(blob)

        tree = self.logic.rebuild_tree(codes)
        data = unpack_bits(payload, tree, symbol_count)
        logger.debug("decompress: %d table entries, %d payload bytes -> %d bytes", len(codes), len(payload), len(data))
        return data

    def compress_file(self, input_path, output_path):
        """Compress input_path into output_path; returns (input size, output size)."""
        data = _read_file("compress", input_path)
        try:
            blob = self.compress(data)
        except (EmptyInputError, InternalConsistencyError) as err:
            raise type(err)(f"{input_path}: {err}") from err
        _write_file("compress", output_path, blob)
        logger.info("compressed %s (%d bytes) -> %s (%d bytes)", input_path, len(data), output_path, len(blob))
        return len(data), len(blob)

    def decompress_file(self, input_path, output_path):
        """Decompress input_path into output_path; returns (input size, output size)."""
        blob = _read_file("decompress", input_path)
        try:
            data = self.decompress(blob)
        except FormatError as err:
            raise FormatError(f"{input_path}: {err}") from err
        _write_file("decompress", output_path, data)
        logger.info("decompressed %s (%d bytes) -> %s (%d bytes)", input_path, len(blob), output_path, len(data))
        return len(blob), len(data)


def _read_file(phase, path):
    try:
        return Path(path).read_bytes()
    except OSError as err:
        raise HuffmanIOError(phase, "input", path, err.strerror or err) from err


def _write_file(phase, path, data):
    try:
        Path(path).write_bytes(data)
    except OSError as err:
        raise HuffmanIOError(phase, "output", path, err.strerror or err) from err
