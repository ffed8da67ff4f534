import pytest

from ciphertrace.cipher import des
from ciphertrace.cipher.codec import bits_to_hex, bytes_to_bits

KEY = bytes.fromhex("133457799BBCDFF1")
PLAINTEXT = bytes.fromhex("0123456789ABCDEF")


def test_fp_is_inverse_of_ip():
    bits = tuple(range(64))
    assert des.permute(des.permute(bits, des.IP), des.FP) == bits


@pytest.mark.parametrize("table,source_len,allow_repeats", [
    (des.IP, 64, False),
    (des.FP, 64, False),
    (des.P, 32, False),
    (des.PC1, 64, False),
    (des.PC2, 56, False),
    (des.E, 32, True),
])
def test_tables_index_into_source(table, source_len, allow_repeats):
    assert all(1 <= pos <= source_len for pos in table)
    if not allow_repeats:
        assert len(set(table)) == len(table)


def test_expansion_covers_every_bit():
    assert set(des.E) == set(range(1, 33))
    assert len(des.E) == 48


def test_shift_table_totals_full_rotation():
    assert len(des.SHIFTS) == 16
    assert sum(des.SHIFTS) == 28


def test_subkeys_shape_and_known_values():
    keys = des.subkeys(KEY)
    assert len(keys) == 16
    assert all(len(k) == 48 for k in keys)
    assert bits_to_hex(keys[0]) == "1B02EFFC7072"
    assert bits_to_hex(keys[15]) == "CB3D8B0E17F5"


def test_sbox_rows_are_permutations():
    for box in des.SBOXES:
        assert len(box) == 4
        for row in box:
            assert sorted(row) == list(range(16))


def test_sbox_lookup_uses_outer_bits_for_row():
    # S1, input 011011: row 01, column 1101 -> 5
    assert des.sbox_lookup(0, (0, 1, 1, 0, 1, 1)) == (0, 1, 0, 1)


def test_feistel_first_round_intermediates():
    block = des.permute(bytes_to_bits(PLAINTEXT), des.IP)
    assert bits_to_hex(block[:32]) == "CC00CCFF"
    assert bits_to_hex(block[32:]) == "F0AAF0AA"

    details = des.feistel(block[32:], des.subkeys(KEY)[0])
    assert bits_to_hex(details.expanded) == "7A15557A1555"
    assert bits_to_hex(details.xored) == "6117BA866527"
    assert "".join(bits_to_hex(o) for o in details.sbox_outputs) == "5C82B597"
    assert bits_to_hex(details.output) == "234AA9BB"

    after = des.feistel_round(block, des.subkeys(KEY)[0])
    assert after[:32] == block[32:]
    assert bits_to_hex(after[32:]) == "EF4A6544"

    detailed, round_details = des.feistel_round_detailed(block, des.subkeys(KEY)[0])
    assert detailed == after
    assert round_details == details


def test_feistel_rejects_bad_lengths():
    with pytest.raises(ValueError):
        des.feistel((0,) * 31, (0,) * 48)
    with pytest.raises(ValueError):
        des.subkeys(b"1234567")
