"""DES primitives over bit vectors (FIPS 46-3).

Tables map output position -> 1-indexed source position, exactly as printed
in the standard.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .codec import BitVector, BlockLike, bits_to_hex, bytes_to_bits

NUM_ROUNDS = 16
BLOCK_SIZE = 8
KEY_SIZE = 8


# ============================================================================
# TABLES
# ============================================================================

IP: Tuple[int, ...] = (
    58, 50, 42, 34, 26, 18, 10, 2,
    60, 52, 44, 36, 28, 20, 12, 4,
    62, 54, 46, 38, 30, 22, 14, 6,
    64, 56, 48, 40, 32, 24, 16, 8,
    57, 49, 41, 33, 25, 17, 9, 1,
    59, 51, 43, 35, 27, 19, 11, 3,
    61, 53, 45, 37, 29, 21, 13, 5,
    63, 55, 47, 39, 31, 23, 15, 7,
)

FP: Tuple[int, ...] = (
    40, 8, 48, 16, 56, 24, 64, 32,
    39, 7, 47, 15, 55, 23, 63, 31,
    38, 6, 46, 14, 54, 22, 62, 30,
    37, 5, 45, 13, 53, 21, 61, 29,
    36, 4, 44, 12, 52, 20, 60, 28,
    35, 3, 43, 11, 51, 19, 59, 27,
    34, 2, 42, 10, 50, 18, 58, 26,
    33, 1, 41, 9, 49, 17, 57, 25,
)

E: Tuple[int, ...] = (
    32, 1, 2, 3, 4, 5,
    4, 5, 6, 7, 8, 9,
    8, 9, 10, 11, 12, 13,
    12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21,
    20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29,
    28, 29, 30, 31, 32, 1,
)

P: Tuple[int, ...] = (
    16, 7, 20, 21, 29, 12, 28, 17,
    1, 15, 23, 26, 5, 18, 31, 10,
    2, 8, 24, 14, 32, 27, 3, 9,
    19, 13, 30, 6, 22, 11, 4, 25,
)

PC1: Tuple[int, ...] = (
    57, 49, 41, 33, 25, 17, 9,
    1, 58, 50, 42, 34, 26, 18,
    10, 2, 59, 51, 43, 35, 27,
    19, 11, 3, 60, 52, 44, 36,
    63, 55, 47, 39, 31, 23, 15,
    7, 62, 54, 46, 38, 30, 22,
    14, 6, 61, 53, 45, 37, 29,
    21, 13, 5, 28, 20, 12, 4,
)

PC2: Tuple[int, ...] = (
    14, 17, 11, 24, 1, 5,
    3, 28, 15, 6, 21, 10,
    23, 19, 12, 4, 26, 8,
    16, 7, 27, 20, 13, 2,
    41, 52, 31, 37, 47, 55,
    30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53,
    46, 42, 50, 36, 29, 32,
)

SHIFTS: Tuple[int, ...] = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

# S1..S8, each 4 rows x 16 columns
SBOXES: Tuple[Tuple[Tuple[int, ...], ...], ...] = (
    ((14, 4, 13, 1, 2, 15, 11, 8, 3, 10, 6, 12, 5, 9, 0, 7),
     (0, 15, 7, 4, 14, 2, 13, 1, 10, 6, 12, 11, 9, 5, 3, 8),
     (4, 1, 14, 8, 13, 6, 2, 11, 15, 12, 9, 7, 3, 10, 5, 0),
     (15, 12, 8, 2, 4, 9, 1, 7, 5, 11, 3, 14, 10, 0, 6, 13)),
    ((15, 1, 8, 14, 6, 11, 3, 4, 9, 7, 2, 13, 12, 0, 5, 10),
     (3, 13, 4, 7, 15, 2, 8, 14, 12, 0, 1, 10, 6, 9, 11, 5),
     (0, 14, 7, 11, 10, 4, 13, 1, 5, 8, 12, 6, 9, 3, 2, 15),
     (13, 8, 10, 1, 3, 15, 4, 2, 11, 6, 7, 12, 0, 5, 14, 9)),
    ((10, 0, 9, 14, 6, 3, 15, 5, 1, 13, 12, 7, 11, 4, 2, 8),
     (13, 7, 0, 9, 3, 4, 6, 10, 2, 8, 5, 14, 12, 11, 15, 1),
     (13, 6, 4, 9, 8, 15, 3, 0, 11, 1, 2, 12, 5, 10, 14, 7),
     (1, 10, 13, 0, 6, 9, 8, 7, 4, 15, 14, 3, 11, 5, 2, 12)),
    ((7, 13, 14, 3, 0, 6, 9, 10, 1, 2, 8, 5, 11, 12, 4, 15),
     (13, 8, 11, 5, 6, 15, 0, 3, 4, 7, 2, 12, 1, 10, 14, 9),
     (10, 6, 9, 0, 12, 11, 7, 13, 15, 1, 3, 14, 5, 2, 8, 4),
     (3, 15, 0, 6, 10, 1, 13, 8, 9, 4, 5, 11, 12, 7, 2, 14)),
    ((2, 12, 4, 1, 7, 10, 11, 6, 8, 5, 3, 15, 13, 0, 14, 9),
     (14, 11, 2, 12, 4, 7, 13, 1, 5, 0, 15, 10, 3, 9, 8, 6),
     (4, 2, 1, 11, 10, 13, 7, 8, 15, 9, 12, 5, 6, 3, 0, 14),
     (11, 8, 12, 7, 1, 14, 2, 13, 6, 15, 0, 9, 10, 4, 5, 3)),
    ((12, 1, 10, 15, 9, 2, 6, 8, 0, 13, 3, 4, 14, 7, 5, 11),
     (10, 15, 4, 2, 7, 12, 9, 5, 6, 1, 13, 14, 0, 11, 3, 8),
     (9, 14, 15, 5, 2, 8, 12, 3, 7, 0, 4, 10, 1, 13, 11, 6),
     (4, 3, 2, 12, 9, 5, 15, 10, 11, 14, 1, 7, 6, 0, 8, 13)),
    ((4, 11, 2, 14, 15, 0, 8, 13, 3, 12, 9, 7, 5, 10, 6, 1),
     (13, 0, 11, 7, 4, 9, 1, 10, 14, 3, 5, 12, 2, 15, 8, 6),
     (1, 4, 11, 13, 12, 3, 7, 14, 10, 15, 6, 8, 0, 5, 9, 2),
     (6, 11, 13, 8, 1, 4, 10, 7, 9, 5, 0, 15, 14, 2, 3, 12)),
    ((13, 2, 8, 4, 6, 15, 11, 1, 10, 9, 3, 14, 5, 0, 12, 7),
     (1, 15, 13, 8, 10, 3, 7, 4, 12, 5, 6, 11, 0, 14, 9, 2),
     (7, 11, 4, 1, 9, 12, 14, 2, 0, 6, 10, 13, 15, 3, 5, 8),
     (2, 1, 14, 7, 4, 10, 8, 13, 15, 12, 9, 0, 3, 5, 6, 11)),
)


# ============================================================================
# BIT HELPERS
# ============================================================================

def permute(bits: Sequence[int], table: Sequence[int]) -> BitVector:
    """Output bit i is input bit table[i] (1-indexed)."""
    return tuple(bits[pos - 1] for pos in table)


def xor_bits(a: Sequence[int], b: Sequence[int]) -> BitVector:
    if len(a) != len(b):
        raise ValueError("xor_bits length mismatch")
    return tuple(x ^ y for x, y in zip(a, b))


def rotate_left(bits: Sequence[int], n: int) -> BitVector:
    n %= len(bits)
    return tuple(bits[n:]) + tuple(bits[:n])


def int_to_bits(value: int, width: int) -> BitVector:
    return tuple((value >> (width - 1 - i)) & 1 for i in range(width))


def bits_to_int(bits: Sequence[int]) -> int:
    value = 0
    for bit in bits:
        value = (value << 1) | bit
    return value


# ============================================================================
# KEY SCHEDULE
# ============================================================================

def subkeys(key: BlockLike) -> Tuple[BitVector, ...]:
    """The 16 48-bit round subkeys, K1..K16 in encryption order.

    PC1 drops the 8 parity bits; each round rotates the 28-bit halves C, D
    left by SHIFTS[i] and selects 48 bits with PC2.
    """
    if len(key) != KEY_SIZE:
        raise ValueError(f"DES key must be {KEY_SIZE} bytes")
    cd = permute(bytes_to_bits(key), PC1)
    c, d = cd[:28], cd[28:]
    keys: List[BitVector] = []
    for shift in SHIFTS:
        c = rotate_left(c, shift)
        d = rotate_left(d, shift)
        keys.append(permute(c + d, PC2))
    return tuple(keys)


# ============================================================================
# FEISTEL FUNCTION
# ============================================================================

@dataclass(frozen=True)
class FeistelDetails:
    """Intermediate values of one evaluation of f(R, K)."""
    subkey: BitVector
    expanded: BitVector             # E(R), 48 bits
    xored: BitVector                # E(R) xor K, 48 bits
    sbox_outputs: Tuple[BitVector, ...]  # 8 groups of 4 bits
    output: BitVector               # P(S-box outputs), 32 bits

    def to_dict(self) -> dict:
        return {
            "subkey": bits_to_hex(self.subkey),
            "expanded": bits_to_hex(self.expanded),
            "xored": bits_to_hex(self.xored),
            "sbox_outputs": [bits_to_hex(o) for o in self.sbox_outputs],
            "output": bits_to_hex(self.output),
        }


def sbox_lookup(box: int, group: Sequence[int]) -> BitVector:
    """Row from the outer bits (b0 b5), column from the middle four."""
    row = (group[0] << 1) | group[5]
    col = bits_to_int(group[1:5])
    return int_to_bits(SBOXES[box][row][col], 4)


def feistel(right: Sequence[int], subkey: Sequence[int]) -> FeistelDetails:
    if len(right) != 32:
        raise ValueError("feistel requires a 32-bit half-block")
    if len(subkey) != 48:
        raise ValueError("feistel requires a 48-bit subkey")
    expanded = permute(right, E)
    xored = xor_bits(expanded, subkey)
    outputs = tuple(sbox_lookup(g, xored[g * 6:g * 6 + 6]) for g in range(8))
    substituted = tuple(bit for out in outputs for bit in out)
    return FeistelDetails(
        subkey=tuple(subkey),
        expanded=expanded,
        xored=xored,
        sbox_outputs=outputs,
        output=permute(substituted, P),
    )


def feistel_round_detailed(
    block: Sequence[int], subkey: Sequence[int],
) -> Tuple[BitVector, FeistelDetails]:
    """(L, R) -> (R, L xor f(R, K)) on a 64-bit L || R vector, with the f internals."""
    if len(block) != 64:
        raise ValueError("feistel_round requires a 64-bit block")
    left, right = tuple(block[:32]), tuple(block[32:])
    details = feistel(right, subkey)
    return right + xor_bits(left, details.output), details


def feistel_round(block: Sequence[int], subkey: Sequence[int]) -> BitVector:
    return feistel_round_detailed(block, subkey)[0]


def swap_halves(block: Sequence[int]) -> BitVector:
    return tuple(block[32:]) + tuple(block[:32])
