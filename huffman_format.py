# filename: huffman_format.py
"""
Container layouts written in front of the packed payload.

Native (version 1), integers big endian:

[ MAGIC(3) | VERSION(1) | SYMBOL_COUNT(8) | TABLE_SIZE(2)
  | TABLE_SIZE * ( SYMBOL(1) | CODE_LEN(1) | CODE_BITS(ceil(CODE_LEN/8)) )
  | PAYLOAD(...) ]

- CODE_BITS holds the code most significant bit first, zero-padded.
- SYMBOL_COUNT is the number of original bytes; decoding stops there.

Legacy (the original tool's layout), integers little endian, no magic:

[ ENTRY_COUNT(8) | ENTRY_COUNT * ( SYMBOL(1) | CODE_LEN(8) | CODE ascii '0'/'1' )
  | PAYLOAD(...) ]

The legacy table matches the original tool byte for byte, and its payload is
what the original decoder expects. The original encoder padded every code to
a byte of its own, so payloads it wrote do not in general decode here.
"""

from huffman_errors import FormatError

MAGIC = b"HPK"
VERSION = 1

MAX_SYMBOLS = 256
MAX_CODE_LEN = 255

HEADER_SIZE = len(MAGIC) + 1 + 8 + 2


def _take(blob, idx, size, what):
    end = idx + size
    if end > len(blob):
        raise FormatError(f"data truncated while reading {what} at offset {idx}")
    return blob[idx:end], end


def _check_table_size(count):
    if not 1 <= count <= MAX_SYMBOLS:
        raise FormatError(f"code table must hold 1..{MAX_SYMBOLS} entries, found {count}")


# -------------------
# Native container
# -------------------
def encode_code_table(codes):
    if not 1 <= len(codes) <= MAX_SYMBOLS:
        raise ValueError(f"code table must hold 1..{MAX_SYMBOLS} entries, got {len(codes)}")

    out = bytearray()
    out += len(codes).to_bytes(2, "big")
    for char in sorted(codes):
        code = codes[char]
        length = len(code)
        if not 1 <= length <= MAX_CODE_LEN:
            raise ValueError(f"code for byte {char} has unsupported length {length}")
        n_bytes = (length + 7) // 8
        value = int(code, 2) << (n_bytes * 8 - length)
        out.append(char)
        out.append(length)
        out += value.to_bytes(n_bytes, "big")
    return bytes(out)


def decode_code_table(blob, idx=0):
    """Parse a native code table starting at idx.

    Returns (codes, next_idx) where next_idx is the first byte after the table.
    """
    raw, idx = _take(blob, idx, 2, "table size")
    count = int.from_bytes(raw, "big")
    _check_table_size(count)

    codes = {}
    for _ in range(count):
        raw, idx = _take(blob, idx, 2, "table entry")
        char, length = raw[0], raw[1]
        if length == 0:
            raise FormatError(f"code for byte {char} has zero length")
        if char in codes:
            raise FormatError(f"byte {char} appears twice in the code table")

        n_bytes = (length + 7) // 8
        raw, idx = _take(blob, idx, n_bytes, f"code bits of byte {char}")
        value = int.from_bytes(raw, "big")
        pad = n_bytes * 8 - length
        if value & ((1 << pad) - 1):
            raise FormatError(f"non-zero padding in the code of byte {char}")
        codes[char] = format(value >> pad, f"0{length}b")

    return codes, idx


def encode_container(codes, symbol_count, payload):
    if symbol_count < 1:
        raise ValueError("symbol count must be positive")

    header = bytearray()
    header += MAGIC
    header.append(VERSION)
    header += symbol_count.to_bytes(8, "big")
    return bytes(header) + encode_code_table(codes) + payload


def decode_container(blob):
    """Split a native container into (codes, symbol_count, payload)."""
    if len(blob) < HEADER_SIZE:
        raise FormatError(f"data too short for a huffpack header ({len(blob)} bytes)")

    idx = 0
    magic = blob[idx:idx + 3]
    idx += 3
    if magic != MAGIC:
        raise FormatError("not a huffpack file (bad magic number)")
    version = blob[idx]
    idx += 1
    if version != VERSION:
        raise FormatError(f"unsupported huffpack version {version}")

    symbol_count = int.from_bytes(blob[idx:idx + 8], "big")
    idx += 8
    if symbol_count == 0:
        raise FormatError("symbol count is zero")

    codes, idx = decode_code_table(blob, idx)
    return codes, symbol_count, blob[idx:]


# -------------------
# Legacy container
# -------------------
def encode_legacy_container(codes, payload):
    if not 1 <= len(codes) <= MAX_SYMBOLS:
        raise ValueError(f"code table must hold 1..{MAX_SYMBOLS} entries, got {len(codes)}")

    out = bytearray()
    out += len(codes).to_bytes(8, "little")
    for char in sorted(codes):
        code = codes[char].encode("ascii")
        out.append(char)
        out += len(code).to_bytes(8, "little")
        out += code
    return bytes(out) + payload


def decode_legacy_container(blob):
    """Split a legacy container into (codes, payload)."""
    raw, idx = _take(blob, 0, 8, "entry count")
    count = int.from_bytes(raw, "little")
    _check_table_size(count)

    codes = {}
    for _ in range(count):
        raw, idx = _take(blob, idx, 9, "table entry")
        char = raw[0]
        length = int.from_bytes(raw[1:], "little")
        if length == 0:
            raise FormatError(f"code for byte {char} is empty")
        if length > MAX_CODE_LEN:
            raise FormatError(f"code for byte {char} has unsupported length {length}")
        if char in codes:
            raise FormatError(f"byte {char} appears twice in the code table")

        raw, idx = _take(blob, idx, length, f"code of byte {char}")
        if raw.translate(None, b"01"):
            raise FormatError(f"code for byte {char} is not a binary string")
        codes[char] = raw.decode("ascii")

    return codes, blob[idx:]
