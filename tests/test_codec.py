from ciphertrace.cipher.codec import (
    bits_to_bytes,
    bits_to_hex,
    block_to_hex,
    block_to_state,
    block_to_text,
    bytes_to_bits,
    hex_to_block,
    is_clean_hex,
    printable_mask,
    split_hex,
    split_text,
    state_to_block,
    text_to_block,
)


def test_text_to_block_pads_with_null_bytes():
    assert text_to_block("AB", 4) == b"AB\x00\x00"


def test_text_to_block_truncates_long_input():
    assert text_to_block("ABCDEFGH", 4) == b"ABCD"
    assert text_to_block(b"\x01\x02\x03", 2) == b"\x01\x02"


def test_text_to_block_keeps_low_byte_of_code_point():
    assert text_to_block("Ł", 1) == bytes([0x41])


def test_block_to_state_is_column_major():
    block = bytes(range(16))
    state = block_to_state(block)
    for i in range(16):
        assert state[i % 4][i // 4] == i
    assert state[0] == (0, 4, 8, 12)
    assert state_to_block(state) == block


def test_hex_to_block_strips_whitespace_and_pads():
    assert hex_to_block(" 0a 1B\n", 4) == b"\x0a\x1b\x00\x00"


def test_hex_to_block_odd_length_and_truncation():
    assert hex_to_block("ABC", 4) == b"\xab\xc0\x00\x00"
    assert hex_to_block("0011223344", 2) == b"\x00\x11"


def test_hex_to_block_reads_bad_digits_as_zero():
    assert hex_to_block("ZZ1G", 2) == b"\x00\x10"


def test_block_to_hex_is_uppercase():
    assert block_to_hex(b"\xab\x01") == "AB01"


def test_is_clean_hex():
    assert is_clean_hex("00112233 44556677", 8)
    assert not is_clean_hex("0011223344556677AA", 8)
    assert not is_clean_hex("001122334455667G", 8)


def test_block_to_text_stops_at_null_and_skips_unprintable():
    assert block_to_text(b"HI\x01J\x00K") == "HIJ"
    assert block_to_text(b"\x00ABC") == ""


def test_printable_mask_matches_block_to_text():
    block = b"HI\x01J\x00K"
    mask = printable_mask(block)
    assert mask == (True, True, False, True, False, False)
    assert "".join(chr(b) for b, keep in zip(block, mask) if keep) == block_to_text(block)


def test_bit_conversions():
    bits = bytes_to_bits(b"\x01\x23")
    assert bits[:8] == (0, 0, 0, 0, 0, 0, 0, 1)
    assert bits_to_hex(bits) == "0123"
    assert bits_to_bytes(bits) == b"\x01\x23"


def test_split_helpers_always_return_one_chunk():
    assert split_text("", 8) == [""]
    assert split_hex("", 8) == [""]
    assert split_text("ABCDEFGHIJ", 8) == ["ABCDEFGH", "IJ"]
    assert split_hex("00" * 9, 8) == ["00" * 8, "00"]
