import random

import pytest

from ciphertrace.cipher import aes
from ciphertrace.cipher.codec import block_to_state, state_to_block


def _rand_state(rng: random.Random):
    return block_to_state(bytes(rng.randrange(0, 256) for _ in range(16)))


def test_sbox_and_inverse_are_mutual_inverses():
    for b in range(256):
        assert aes.INV_SBOX[aes.SBOX[b]] == b
        assert aes.SBOX[aes.INV_SBOX[b]] == b


@pytest.mark.parametrize("forward,inverse", [
    (aes.sub_bytes, aes.inv_sub_bytes),
    (aes.shift_rows, aes.inv_shift_rows),
    (aes.mix_columns, aes.inv_mix_columns),
])
def test_primitives_invert(forward, inverse):
    rng = random.Random(1337)
    for _ in range(50):
        s = _rand_state(rng)
        assert inverse(forward(s)) == s
        assert forward(inverse(s)) == s


def test_add_round_key_is_self_inverse():
    rng = random.Random(7)
    for _ in range(50):
        s, k = _rand_state(rng), _rand_state(rng)
        assert aes.add_round_key(aes.add_round_key(s, k), k) == s


def test_shift_rows_rotates_each_row_left_by_its_index():
    s = block_to_state(bytes(range(16)))
    shifted = aes.shift_rows(s)
    assert shifted[0] == s[0]
    for r in range(1, 4):
        assert shifted[r] == s[r][r:] + s[r][:r]
    assert state_to_block(shifted).hex() == "00050a0f04090e03080d02070c01060b"


def test_mix_columns_known_column():
    # FIPS-197 style example: db 13 53 45 -> 8e 4d a1 bc
    block = bytes([0xDB, 0x13, 0x53, 0x45] * 4)
    mixed = state_to_block(aes.mix_columns(block_to_state(block)))
    assert mixed[:4] == bytes([0x8E, 0x4D, 0xA1, 0xBC])


def test_primitives_return_new_tuples_and_validate_shape():
    s = block_to_state(bytes(16))
    assert isinstance(aes.sub_bytes(s), tuple)
    with pytest.raises(ValueError):
        aes.sub_bytes(((0, 0, 0),))


def test_key_expansion_shape():
    words = aes.expand_key(bytes(16))
    assert len(words) == 44
    keys = aes.round_keys(b"MYSECRETKEY12345")
    assert len(keys) == 11
    assert state_to_block(keys[0]) == b"MYSECRETKEY12345"


def test_key_expansion_fips197_appendix_a1():
    key = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
    words = aes.expand_key(key)
    assert bytes(words[4]).hex() == "a0fafe17"
    assert bytes(words[43]).hex() == "b6630ca6"
    keys = aes.round_keys(key)
    assert state_to_block(keys[10]).hex() == "d014f9a8c9ee2589e13f0cc8b6630ca6"


def test_expand_key_rejects_wrong_length():
    with pytest.raises(ValueError):
        aes.expand_key(b"short")
