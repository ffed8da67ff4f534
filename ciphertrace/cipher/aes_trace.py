"""AES-128 trace builder: one Step per primitive application, 43 per run.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import List, Tuple

from .aes import (
    BLOCK_SIZE,
    KEY_SIZE,
    NUM_ROUNDS,
    add_round_key,
    inv_mix_columns,
    inv_shift_rows,
    inv_sub_bytes,
    mix_columns,
    round_keys,
    shift_rows,
    sub_bytes,
)
from .codec import BlockLike, State, block_to_state
from .trace import Trace, Transform, fold

logger = logging.getLogger(__name__)


def _check_inputs(block: BlockLike, key: BlockLike) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"AES block must be {BLOCK_SIZE} bytes")
    if len(key) != KEY_SIZE:
        raise ValueError(f"AES-128 key must be {KEY_SIZE} bytes")


def _preamble(keys: Tuple[State, ...], what: str) -> List[Transform]:
    return [
        Transform(
            name=f"Initial {what}",
            description=f"{what} block of 16 bytes",
            operation="input",
            round_index=0,
        ),
        Transform(
            name="Block to State",
            description="Arrange the 16 bytes as a 4x4 matrix, column by column",
            operation="block_to_state",
            round_index=0,
        ),
        Transform(
            name="Key Expansion",
            description="Expand the 128-bit key into 11 round keys (44 words)",
            operation="key_expansion",
            round_index=0,
            round_keys=keys,
        ),
    ]


def _add_key(name: str, description: str, round_index: int, key: State) -> Transform:
    return Transform(
        name=name,
        description=description,
        operation="add_round_key",
        round_index=round_index,
        apply=partial(add_round_key, round_key=key),
        round_key=key,
    )


def encrypt_transforms(keys: Tuple[State, ...]) -> List[Transform]:
    out = _preamble(keys, "Plaintext")
    out.append(_add_key(
        "Add Round Key (Initial)", "XOR state with round key 0", 0, keys[0],
    ))
    for r in range(1, NUM_ROUNDS + 1):
        out.append(Transform(
            name=f"Round {r}: SubBytes",
            description="Replace each byte using the S-box",
            operation="sub_bytes",
            round_index=r,
            apply=sub_bytes,
        ))
        out.append(Transform(
            name=f"Round {r}: ShiftRows",
            description="Rotate row r left by r positions",
            operation="shift_rows",
            round_index=r,
            apply=shift_rows,
        ))
        if r == NUM_ROUNDS:
            out.append(_add_key(
                f"Round {r}: AddRoundKey (Final)",
                f"XOR state with round key {r}; encryption complete",
                r, keys[r],
            ))
        else:
            out.append(Transform(
                name=f"Round {r}: MixColumns",
                description="Multiply each column by the MixColumns matrix in GF(2^8)",
                operation="mix_columns",
                round_index=r,
                apply=mix_columns,
            ))
            out.append(_add_key(
                f"Round {r}: AddRoundKey", f"XOR state with round key {r}", r, keys[r],
            ))
    return out


def decrypt_transforms(keys: Tuple[State, ...]) -> List[Transform]:
    out = _preamble(keys, "Ciphertext")
    out.append(_add_key(
        "Add Round Key (Initial)", f"XOR state with round key {NUM_ROUNDS}", 0, keys[NUM_ROUNDS],
    ))
    for r in range(1, NUM_ROUNDS + 1):
        k = NUM_ROUNDS - r
        out.append(Transform(
            name=f"Round {r}: InvShiftRows",
            description="Rotate row r right by r positions",
            operation="inv_shift_rows",
            round_index=r,
            apply=inv_shift_rows,
        ))
        out.append(Transform(
            name=f"Round {r}: InvSubBytes",
            description="Replace each byte using the inverse S-box",
            operation="inv_sub_bytes",
            round_index=r,
            apply=inv_sub_bytes,
        ))
        if r == NUM_ROUNDS:
            out.append(_add_key(
                f"Round {r}: AddRoundKey (Final)",
                f"XOR state with round key {k}; decryption complete",
                r, keys[k],
            ))
        else:
            out.append(_add_key(
                f"Round {r}: AddRoundKey", f"XOR state with round key {k}", r, keys[k],
            ))
            out.append(Transform(
                name=f"Round {r}: InvMixColumns",
                description="Multiply each column by the inverse MixColumns matrix in GF(2^8)",
                operation="inv_mix_columns",
                round_index=r,
                apply=inv_mix_columns,
            ))
    return out


def encrypt_with_trace(block: BlockLike, key: BlockLike) -> Trace:
    _check_inputs(block, key)
    steps = fold(block_to_state(block), encrypt_transforms(round_keys(key)))
    logger.debug("AES encrypt trace built: %d steps", len(steps))
    return Trace(algorithm="AES", direction="encrypt", steps=steps)


def decrypt_with_trace(block: BlockLike, key: BlockLike) -> Trace:
    _check_inputs(block, key)
    steps = fold(block_to_state(block), decrypt_transforms(round_keys(key)))
    logger.debug("AES decrypt trace built: %d steps", len(steps))
    return Trace(algorithm="AES", direction="decrypt", steps=steps)
