import pytest

from huffman_core import HuffmanLogic
from huffman_errors import FormatError
from huffman_format import (
	HEADER_SIZE,
	MAGIC,
	VERSION,
	decode_code_table,
	decode_container,
	decode_legacy_container,
	encode_code_table,
	encode_container,
	encode_legacy_container,
)


def _codes_with_distinct(n):
	# symbol i appears i + 1 times, so lengths vary across the table
	data = bytes(i for i in range(n) for _ in range(i + 1))
	logic = HuffmanLogic()
	return logic.generate_codes(logic.build_tree(logic.count_frequencies(data)))


def _header(symbol_count=1):
	return MAGIC + bytes([VERSION]) + symbol_count.to_bytes(8, "big")


@pytest.mark.parametrize("n", [1, 2, 3, 17, 128, 255, 256])
def test_code_table_roundtrip(n):
	codes = _codes_with_distinct(n)
	blob = encode_code_table(codes)
	decoded, idx = decode_code_table(blob + b"payload")
	assert decoded == codes
	assert idx == len(blob)


def test_code_table_multi_byte_code():
	codes = {7: "101010101011", 8: "0"}
	blob = encode_code_table(codes)
	assert blob == b"\x00\x02" + b"\x07\x0c\xaa\xb0" + b"\x08\x01\x00"
	assert decode_code_table(blob)[0] == codes


def test_encode_code_table_rejects_empty():
	with pytest.raises(ValueError):
		encode_code_table({})


def test_container_roundtrip():
	codes = {65: "0", 66: "11", 67: "10"}
	blob = encode_container(codes, 6, b"\x1f\x00")
	assert decode_container(blob) == (codes, 6, b"\x1f\x00")


def test_container_too_short():
	with pytest.raises(FormatError):
		decode_container(MAGIC)


def test_container_bad_magic():
	blob = b"XYZ" + bytes(HEADER_SIZE)
	with pytest.raises(FormatError):
		decode_container(blob)


def test_container_unsupported_version():
	blob = MAGIC + b"\x02" + (1).to_bytes(8, "big") + b"\x00\x01A\x01\x00"
	with pytest.raises(FormatError):
		decode_container(blob)


def test_container_zero_symbol_count():
	blob = _header(0) + b"\x00\x01A\x01\x00"
	with pytest.raises(FormatError):
		decode_container(blob)


@pytest.mark.parametrize("table", [
	b"\x00\x00",
	b"\x01\x01",
	b"\x00\x02A\x01\x00",
	b"\x00\x02A\x01\x00A\x01\x80",
	b"\x00\x01A\x00",
	b"\x00\x01A\x01\x81",
	b"\x00\x01A\x0c\xaa",
])
def test_container_rejects_malformed_tables(table):
	with pytest.raises(FormatError):
		decode_container(_header(4) + table)


def test_legacy_container_roundtrip():
	codes = {65: "0", 66: "11", 67: "10"}
	blob = encode_legacy_container(codes, b"\x1f\x00")
	assert decode_legacy_container(blob) == (codes, b"\x1f\x00")


def test_legacy_entry_layout():
	blob = encode_legacy_container({200: "01"}, b"")
	assert blob == (1).to_bytes(8, "little") + b"\xc8" + (2).to_bytes(8, "little") + b"01"


def _legacy_entry(char, code):
	return bytes([char]) + len(code).to_bytes(8, "little") + code


@pytest.mark.parametrize("blob", [
	b"",
	b"\x01\x00\x00",
	(0).to_bytes(8, "little"),
	(257).to_bytes(8, "little"),
	(1).to_bytes(8, "little") + _legacy_entry(65, b""),
	(1).to_bytes(8, "little") + _legacy_entry(65, b"0x"),
	(2).to_bytes(8, "little") + _legacy_entry(65, b"0") + _legacy_entry(65, b"1"),
	(1).to_bytes(8, "little") + b"A" + (5).to_bytes(8, "little") + b"01",
	(2).to_bytes(8, "little") + _legacy_entry(65, b"0"),
])
def test_legacy_rejects_malformed_tables(blob):
	with pytest.raises(FormatError):
		decode_legacy_container(blob)
