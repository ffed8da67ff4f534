"""Bit-exact AES-128 and DES with full step traces.

Research / education only. Do NOT use in production.
"""

from .codec import (
    InvalidInputError,
    block_to_hex,
    block_to_state,
    block_to_text,
    hex_to_block,
    printable_mask,
    state_to_block,
    text_to_block,
)
from .gf import gmul
from .registry import (
    AESEngine,
    CipherEngine,
    DESEngine,
    EngineRegistry,
    run_cipher,
    trace_message,
)
from .request import CipherRequest
from .trace import MessageTrace, Step, Trace, Transform, fold

__all__ = [
    "InvalidInputError",
    "block_to_hex",
    "block_to_state",
    "block_to_text",
    "hex_to_block",
    "printable_mask",
    "state_to_block",
    "text_to_block",
    "gmul",
    "AESEngine",
    "CipherEngine",
    "DESEngine",
    "EngineRegistry",
    "run_cipher",
    "trace_message",
    "CipherRequest",
    "MessageTrace",
    "Step",
    "Trace",
    "Transform",
    "fold",
]
