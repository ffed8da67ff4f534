"""DES trace builder: initial input, IP, 16 Feistel rounds, swap, FP (20 steps).

The working state of every step is the 64-bit vector L || R.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, List, Sequence, Tuple

from .codec import BitVector, BlockLike, bytes_to_bits
from .des import (
    BLOCK_SIZE,
    FP,
    IP,
    KEY_SIZE,
    NUM_ROUNDS,
    feistel_round_detailed,
    permute,
    subkeys,
    swap_halves,
)
from .trace import Direction, Trace, Transform, fold

logger = logging.getLogger(__name__)


def _check_inputs(block: BlockLike, key: BlockLike) -> None:
    if len(block) != BLOCK_SIZE:
        raise ValueError(f"DES block must be {BLOCK_SIZE} bytes")
    if len(key) != KEY_SIZE:
        raise ValueError(f"DES key must be {KEY_SIZE} bytes")


def _round(state: Sequence[int], subkey: BitVector) -> Tuple[BitVector, Dict[str, Any]]:
    after, details = feistel_round_detailed(state, subkey)
    return after, {"feistel": details}


def round_transforms(keys: Tuple[BitVector, ...], direction: Direction) -> List[Transform]:
    """Transforms for the full run; decryption takes the subkeys last-to-first."""
    decrypt = direction == "decrypt"
    what = "ciphertext" if decrypt else "plaintext"
    out = [
        Transform(
            name=f"Initial {'Ciphertext' if decrypt else 'Input'}",
            description=f"Convert {what} to 64-bit binary",
            operation="initial_input",
            round_index=0,
        ),
        Transform(
            name="Initial Permutation (IP)",
            description="Rearrange bits according to the IP table",
            operation="initial_permutation",
            round_index=0,
            apply=partial(permute, table=IP),
        ),
    ]
    for i in range(NUM_ROUNDS):
        k = NUM_ROUNDS - 1 - i if decrypt else i
        subkey = keys[k]
        out.append(Transform(
            name=f"Round {i + 1}",
            description=(
                f"L{i + 1} = R{i}, R{i + 1} = L{i} xor f(R{i}, K{k + 1})"
            ),
            operation="round",
            round_index=i + 1,
            round_key=subkey,
            apply_with_detail=partial(_round, subkey=subkey),
        ))
    out.append(Transform(
        name="32-bit Swap",
        description=f"Swap L{NUM_ROUNDS} and R{NUM_ROUNDS} before the final permutation",
        operation="swap",
        round_index=NUM_ROUNDS,
        apply=swap_halves,
    ))
    out.append(Transform(
        name="Final Permutation (FP)",
        description=(
            "Apply the inverse of the initial permutation to get the "
            + ("plaintext" if decrypt else "ciphertext")
        ),
        operation="final_permutation",
        round_index=NUM_ROUNDS,
        apply=partial(permute, table=FP),
    ))
    return out


def _build(block: BlockLike, key: BlockLike, direction: Direction) -> Trace:
    _check_inputs(block, key)
    steps = fold(bytes_to_bits(block), round_transforms(subkeys(key), direction))
    logger.debug("DES %s trace built: %d steps", direction, len(steps))
    return Trace(algorithm="DES", direction=direction, steps=steps)


def encrypt_with_trace(block: BlockLike, key: BlockLike) -> Trace:
    return _build(block, key, "encrypt")


def decrypt_with_trace(block: BlockLike, key: BlockLike) -> Trace:
    return _build(block, key, "decrypt")
