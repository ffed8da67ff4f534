"""AES-128 primitives operating on immutable 4x4 states (FIPS-197).

Every function returns a new state; nothing is mutated in place.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .codec import BlockLike, State, block_to_state
from .gf import gmul

Word = Tuple[int, int, int, int]

NUM_ROUNDS = 10
BLOCK_SIZE = 16
KEY_SIZE = 16


# ============================================================================
# TABLES
# ============================================================================

SBOX: Tuple[int, ...] = (
    0x63,0x7c,0x77,0x7b,0xf2,0x6b,0x6f,0xc5,0x30,0x01,0x67,0x2b,0xfe,0xd7,0xab,0x76,
    0xca,0x82,0xc9,0x7d,0xfa,0x59,0x47,0xf0,0xad,0xd4,0xa2,0xaf,0x9c,0xa4,0x72,0xc0,
    0xb7,0xfd,0x93,0x26,0x36,0x3f,0xf7,0xcc,0x34,0xa5,0xe5,0xf1,0x71,0xd8,0x31,0x15,
    0x04,0xc7,0x23,0xc3,0x18,0x96,0x05,0x9a,0x07,0x12,0x80,0xe2,0xeb,0x27,0xb2,0x75,
    0x09,0x83,0x2c,0x1a,0x1b,0x6e,0x5a,0xa0,0x52,0x3b,0xd6,0xb3,0x29,0xe3,0x2f,0x84,
    0x53,0xd1,0x00,0xed,0x20,0xfc,0xb1,0x5b,0x6a,0xcb,0xbe,0x39,0x4a,0x4c,0x58,0xcf,
    0xd0,0xef,0xaa,0xfb,0x43,0x4d,0x33,0x85,0x45,0xf9,0x02,0x7f,0x50,0x3c,0x9f,0xa8,
    0x51,0xa3,0x40,0x8f,0x92,0x9d,0x38,0xf5,0xbc,0xb6,0xda,0x21,0x10,0xff,0xf3,0xd2,
    0xcd,0x0c,0x13,0xec,0x5f,0x97,0x44,0x17,0xc4,0xa7,0x7e,0x3d,0x64,0x5d,0x19,0x73,
    0x60,0x81,0x4f,0xdc,0x22,0x2a,0x90,0x88,0x46,0xee,0xb8,0x14,0xde,0x5e,0x0b,0xdb,
    0xe0,0x32,0x3a,0x0a,0x49,0x06,0x24,0x5c,0xc2,0xd3,0xac,0x62,0x91,0x95,0xe4,0x79,
    0xe7,0xc8,0x37,0x6d,0x8d,0xd5,0x4e,0xa9,0x6c,0x56,0xf4,0xea,0x65,0x7a,0xae,0x08,
    0xba,0x78,0x25,0x2e,0x1c,0xa6,0xb4,0xc6,0xe8,0xdd,0x74,0x1f,0x4b,0xbd,0x8b,0x8a,
    0x70,0x3e,0xb5,0x66,0x48,0x03,0xf6,0x0e,0x61,0x35,0x57,0xb9,0x86,0xc1,0x1d,0x9e,
    0xe1,0xf8,0x98,0x11,0x69,0xd9,0x8e,0x94,0x9b,0x1e,0x87,0xe9,0xce,0x55,0x28,0xdf,
    0x8c,0xa1,0x89,0x0d,0xbf,0xe6,0x42,0x68,0x41,0x99,0x2d,0x0f,0xb0,0x54,0xbb,0x16,
)

INV_SBOX: Tuple[int, ...] = tuple(SBOX.index(v) for v in range(256))

RCON: Tuple[int, ...] = (0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)

MIX_MATRIX: Tuple[Word, ...] = (
    (2, 3, 1, 1),
    (1, 2, 3, 1),
    (1, 1, 2, 3),
    (3, 1, 1, 2),
)

INV_MIX_MATRIX: Tuple[Word, ...] = (
    (0x0E, 0x0B, 0x0D, 0x09),
    (0x09, 0x0E, 0x0B, 0x0D),
    (0x0D, 0x09, 0x0E, 0x0B),
    (0x0B, 0x0D, 0x09, 0x0E),
)


def _check_state(state: State, name: str) -> None:
    if len(state) != 4 or any(len(row) != 4 for row in state):
        raise ValueError(f"{name} requires a 4x4 state")


# ============================================================================
# ROUND TRANSFORMATIONS
# ============================================================================

def sub_bytes(state: State) -> State:
    """Replace every byte through the S-box."""
    _check_state(state, "sub_bytes")
    return tuple(tuple(SBOX[b] for b in row) for row in state)


def inv_sub_bytes(state: State) -> State:
    _check_state(state, "inv_sub_bytes")
    return tuple(tuple(INV_SBOX[b] for b in row) for row in state)


def shift_rows(state: State) -> State:
    """Rotate row r left by r positions; row 0 stays put."""
    _check_state(state, "shift_rows")
    return tuple(row[r:] + row[:r] for r, row in enumerate(state))


def inv_shift_rows(state: State) -> State:
    """Rotate row r right by r positions."""
    _check_state(state, "inv_shift_rows")
    return tuple(row[4 - r:] + row[:4 - r] for r, row in enumerate(state))


def _mix(state: State, matrix: Sequence[Word]) -> State:
    cols: List[Word] = []
    for c in range(4):
        col = [state[r][c] for r in range(4)]
        mixed = []
        for coeffs in matrix:
            acc = 0
            for k, x in zip(coeffs, col):
                acc ^= gmul(k, x)
            mixed.append(acc)
        cols.append(tuple(mixed))
    return tuple(tuple(cols[c][r] for c in range(4)) for r in range(4))


def mix_columns(state: State) -> State:
    """Multiply each column by the fixed MixColumns matrix in GF(2^8)."""
    _check_state(state, "mix_columns")
    return _mix(state, MIX_MATRIX)


def inv_mix_columns(state: State) -> State:
    _check_state(state, "inv_mix_columns")
    return _mix(state, INV_MIX_MATRIX)


def add_round_key(state: State, round_key: State) -> State:
    """Byte-wise XOR with a round key. Self-inverse."""
    _check_state(state, "add_round_key")
    _check_state(round_key, "add_round_key")
    return tuple(
        tuple(b ^ k for b, k in zip(row, key_row))
        for row, key_row in zip(state, round_key)
    )


# ============================================================================
# KEY SCHEDULE
# ============================================================================

def rot_word(word: Word) -> Word:
    return word[1:] + word[:1]


def sub_word(word: Word) -> Word:
    return tuple(SBOX[b] for b in word)


def expand_key(key: BlockLike) -> Tuple[Word, ...]:
    """Rijndael key expansion: 44 four-byte words from a 16-byte key."""
    if len(key) != KEY_SIZE:
        raise ValueError(f"AES-128 key must be {KEY_SIZE} bytes")
    w: List[Word] = [tuple(key[i * 4:i * 4 + 4]) for i in range(4)]
    for i in range(4, 4 * (NUM_ROUNDS + 1)):
        temp = w[i - 1]
        if i % 4 == 0:
            temp = sub_word(rot_word(temp))
            temp = (temp[0] ^ RCON[i // 4 - 1],) + temp[1:]
        w.append(tuple(a ^ b for a, b in zip(w[i - 4], temp)))
    return tuple(w)


def round_keys(key: BlockLike) -> Tuple[State, ...]:
    """The 11 round keys; round key r is words 4r..4r+3 laid out as columns."""
    words = expand_key(key)
    keys = []
    for r in range(NUM_ROUNDS + 1):
        block = bytes(b for word in words[4 * r:4 * r + 4] for b in word)
        keys.append(block_to_state(block))
    return tuple(keys)
