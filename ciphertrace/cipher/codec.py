"""Conversions between text, fixed-size blocks, AES states, bit vectors and hex.

All parsing here is permissive: short input is padded with zero bytes, long
input is truncated, and malformed hex digits read as zero. Nothing in this
module raises for user-supplied text or hex.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

import string
from typing import List, Sequence, Tuple, Union

# AES working state: state[row][col], populated column-major from a block.
State = Tuple[Tuple[int, int, int, int], ...]

# DES working data: one int (0 or 1) per bit, most significant bit first.
BitVector = Tuple[int, ...]

BlockLike = Union[bytes, bytearray, Sequence[int]]

_HEX_DIGITS = frozenset(string.hexdigits)


class InvalidInputError(ValueError):
    """Decrypt input rejected because strict hex parsing is enabled."""


# ============================================================================
# TEXT <-> BLOCK
# ============================================================================

def text_to_block(text: Union[str, bytes], block_size: int) -> bytes:
    """Take character codes of `text` and pad with null bytes to `block_size`.

    Each character contributes the low byte of its code point. Input longer
    than `block_size` is truncated.
    """
    if isinstance(text, (bytes, bytearray)):
        raw = bytes(text[:block_size])
    else:
        raw = bytes(ord(ch) & 0xFF for ch in text[:block_size])
    return raw.ljust(block_size, b"\x00")


def is_printable(b: int) -> bool:
    return 32 <= b <= 126


def block_to_text(block: BlockLike) -> str:
    """Best-effort rendering of a block as text.

    Stops at the first null byte (padding) and skips any other byte outside
    printable ASCII, so ciphertext shown this way can silently lose bytes.
    Use `printable_mask` to see which bytes were kept.
    """
    out: List[str] = []
    for b in block:
        if b == 0:
            break
        if is_printable(b):
            out.append(chr(b))
    return "".join(out)


def printable_mask(block: BlockLike) -> Tuple[bool, ...]:
    """One flag per byte: True when `block_to_text` would render it."""
    mask: List[bool] = []
    terminated = False
    for b in block:
        if b == 0:
            terminated = True
        mask.append(not terminated and is_printable(b))
    return tuple(mask)


# ============================================================================
# HEX
# ============================================================================

def _normalize_hex(hex_str: str) -> str:
    return "".join(hex_str.split()).upper()


def _digit(ch: str) -> int:
    # Unparseable digits read as zero
    return int(ch, 16) if ch in _HEX_DIGITS else 0


def hex_to_block(hex_str: str, block_size: int) -> bytes:
    """Lossy parse of `hex_str` into exactly `block_size` bytes.

    Whitespace is stripped, an odd trailing digit is completed with a zero
    nibble, short input is right-padded with zero bytes and over-length
    input is truncated.
    """
    digits = _normalize_hex(hex_str)[: block_size * 2]
    if len(digits) % 2:
        digits += "0"
    raw = bytes(
        (_digit(digits[i]) << 4) | _digit(digits[i + 1])
        for i in range(0, len(digits), 2)
    )
    return raw.ljust(block_size, b"\x00")


def block_to_hex(block: BlockLike) -> str:
    return "".join(f"{b:02X}" for b in block)


def is_clean_hex(hex_str: str, block_size: int) -> bool:
    """True when `hex_str` holds exactly one block of valid hex digits."""
    digits = _normalize_hex(hex_str)
    return len(digits) == block_size * 2 and all(ch in _HEX_DIGITS for ch in digits)


def split_hex(hex_str: str, block_size: int) -> List[str]:
    """Split hex digits into per-block chunks (at least one, possibly short)."""
    digits = _normalize_hex(hex_str)
    width = block_size * 2
    chunks = [digits[i:i + width] for i in range(0, len(digits), width)]
    return chunks or [""]


def split_text(text: str, block_size: int) -> List[str]:
    chunks = [text[i:i + block_size] for i in range(0, len(text), block_size)]
    return chunks or [""]


# ============================================================================
# AES STATE (column-major)
# ============================================================================

def block_to_state(block: BlockLike) -> State:
    """Byte i of the block lands at row i % 4, column i // 4."""
    if len(block) != 16:
        raise ValueError("block_to_state requires a 16-byte block")
    return tuple(
        tuple(block[col * 4 + row] for col in range(4)) for row in range(4)
    )


def state_to_block(state: State) -> bytes:
    if len(state) != 4 or any(len(row) != 4 for row in state):
        raise ValueError("state_to_block requires a 4x4 state")
    return bytes(state[i % 4][i // 4] for i in range(16))


def state_to_hex_rows(state: State) -> List[str]:
    """Rows of the state as space-separated hex, for console display."""
    return [" ".join(f"{b:02X}" for b in row) for row in state]


# ============================================================================
# BIT VECTORS (DES)
# ============================================================================

def bytes_to_bits(data: BlockLike) -> BitVector:
    return tuple((byte >> (7 - i)) & 1 for byte in data for i in range(8))


def bits_to_bytes(bits: Sequence[int]) -> bytes:
    if len(bits) % 8:
        raise ValueError("bit vector length must be a multiple of 8")
    out = bytearray(len(bits) // 8)
    for i, bit in enumerate(bits):
        out[i // 8] |= (bit & 1) << (7 - (i % 8))
    return bytes(out)


def bits_to_hex(bits: Sequence[int]) -> str:
    """Hex rendering of a bit vector, one digit per 4 bits (uppercase)."""
    if len(bits) % 4:
        raise ValueError("bit vector length must be a multiple of 4")
    digits = []
    for i in range(0, len(bits), 4):
        nibble = (bits[i] << 3) | (bits[i + 1] << 2) | (bits[i + 2] << 1) | bits[i + 3]
        digits.append(f"{nibble:X}")
    return "".join(digits)
