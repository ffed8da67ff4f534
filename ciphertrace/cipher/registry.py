"""Algorithm engines behind one uniform `trace(direction, message, key)` call.

Research / education only. Do NOT use in production.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..config import Settings, load_settings
from . import aes, aes_trace, des, des_trace
from .codec import (
    BlockLike,
    InvalidInputError,
    hex_to_block,
    is_clean_hex,
    split_hex,
    split_text,
    text_to_block,
)
from .request import CipherRequest
from .trace import Direction, MessageTrace, Trace

logger = logging.getLogger(__name__)


class CipherEngine:
    """One block cipher that can explain itself step by step."""

    name: str = ""
    block_size: int = 0
    key_size: int = 0
    rounds: int = 0

    def encrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:  # pragma: no cover
        raise NotImplementedError

    def decrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:  # pragma: no cover
        raise NotImplementedError

    def trace_block(self, direction: Direction, block: BlockLike, key: BlockLike) -> Trace:
        if direction == "encrypt":
            return self.encrypt_with_trace(block, key)
        if direction == "decrypt":
            return self.decrypt_with_trace(block, key)
        raise ValueError(f"Unknown direction: {direction}")

    def encrypt_block(self, plaintext_block: bytes, key: bytes) -> bytes:
        return self.encrypt_with_trace(plaintext_block, key).output

    def decrypt_block(self, ciphertext_block: bytes, key: bytes) -> bytes:
        return self.decrypt_with_trace(ciphertext_block, key).output

    def effective_key_bits(self) -> List[int]:
        """Key bit positions (MSB first) that reach the key schedule."""
        return list(range(self.key_size * 8))

    def key_block(self, key: str) -> bytes:
        return text_to_block(key, self.key_size)

    def trace(
        self,
        direction: Direction,
        message: str,
        key: str,
        *,
        settings: Optional[Settings] = None,
    ) -> Trace:
        """Trace one block: text in for encryption, hex in for decryption."""
        settings = settings or load_settings()
        key_block = self.key_block(key)

        if direction == "encrypt":
            return self.encrypt_with_trace(text_to_block(message, self.block_size), key_block)
        if direction != "decrypt":
            raise ValueError(f"Unknown direction: {direction}")

        if not is_clean_hex(message, self.block_size):
            if settings.strict_hex:
                raise InvalidInputError(
                    f"{self.name} ciphertext must be exactly {self.block_size * 2} hex digits"
                )
            if settings.decrypt_fallback:
                logger.warning(
                    "%s decrypt input is not one block of hex; re-encrypting it as text",
                    self.name,
                )
                ciphertext = self.encrypt_block(text_to_block(message, self.block_size), key_block)
                return self.decrypt_with_trace(ciphertext, key_block)
            logger.warning(
                "%s decrypt input is not one block of hex; parsing it permissively",
                self.name,
            )
        return self.decrypt_with_trace(hex_to_block(message, self.block_size), key_block)

    def trace_message(
        self,
        direction: Direction,
        message: str,
        key: str,
        *,
        settings: Optional[Settings] = None,
    ) -> MessageTrace:
        """Trace every block of a message independently with the same key."""
        settings = settings or load_settings()
        key_block = self.key_block(key)

        if direction == "encrypt":
            blocks = [text_to_block(c, self.block_size) for c in split_text(message, self.block_size)]
        elif direction == "decrypt":
            chunks = split_hex(message, self.block_size)
            blocks = [hex_to_block(c, self.block_size) for c in chunks]
            if not all(is_clean_hex(c, self.block_size) for c in chunks):
                if settings.strict_hex:
                    raise InvalidInputError(
                        f"{self.name} ciphertext must be whole blocks of {self.block_size * 2} hex digits"
                    )
                if settings.decrypt_fallback:
                    logger.warning(
                        "%s decrypt input is not whole blocks of hex; re-encrypting it as text",
                        self.name,
                    )
                    blocks = [
                        self.encrypt_block(text_to_block(c, self.block_size), key_block)
                        for c in split_text(message, self.block_size)
                    ]
                else:
                    logger.warning(
                        "%s decrypt input is not whole blocks of hex; parsing it permissively",
                        self.name,
                    )
        else:
            raise ValueError(f"Unknown direction: {direction}")

        traces = tuple(self.trace_block(direction, b, key_block) for b in blocks)
        logger.debug("%s %s message traced: %d block(s)", self.name, direction, len(traces))
        return MessageTrace(algorithm=self.name, direction=direction, blocks=traces)


@dataclass(frozen=True)
class AESEngine(CipherEngine):
    name: str = "AES"
    block_size: int = aes.BLOCK_SIZE
    key_size: int = aes.KEY_SIZE
    rounds: int = aes.NUM_ROUNDS

    def encrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:
        return aes_trace.encrypt_with_trace(block, key)

    def decrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:
        return aes_trace.decrypt_with_trace(block, key)


@dataclass(frozen=True)
class DESEngine(CipherEngine):
    name: str = "DES"
    block_size: int = des.BLOCK_SIZE
    key_size: int = des.KEY_SIZE
    rounds: int = des.NUM_ROUNDS

    def effective_key_bits(self) -> List[int]:
        # PC1 drops the low (parity) bit of every key byte
        return sorted(p - 1 for p in des.PC1)

    def encrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:
        return des_trace.encrypt_with_trace(block, key)

    def decrypt_with_trace(self, block: BlockLike, key: BlockLike) -> Trace:
        return des_trace.decrypt_with_trace(block, key)


def builtin_engines() -> Dict[str, CipherEngine]:
    return {"AES": AESEngine(), "DES": DESEngine()}


class EngineRegistry:
    def __init__(self):
        self._engines: Dict[str, CipherEngine] = builtin_engines()

    def get(self, name: str) -> CipherEngine:
        key = name.upper()
        if key not in self._engines:
            raise KeyError(f"Unknown algorithm: {name}")
        return self._engines[key]

    def list(self) -> List[CipherEngine]:
        return [self._engines[k] for k in sorted(self._engines)]

    def names(self) -> List[str]:
        return sorted(self._engines)

    def exists(self, name: str) -> bool:
        return name.upper() in self._engines

    def register(self, engine: CipherEngine) -> None:
        self._engines[engine.name.upper()] = engine


def run_cipher(
    algorithm: str,
    direction: str,
    message: str,
    key: str,
    *,
    settings: Optional[Settings] = None,
    registry: Optional[EngineRegistry] = None,
) -> Trace:
    """Validate a request and return the full step trace of one block."""
    req = CipherRequest(algorithm=algorithm, direction=direction, message=message, key=key)
    reg = registry or EngineRegistry()
    return reg.get(req.algorithm).trace(req.direction, req.message, req.key, settings=settings)


def trace_message(
    algorithm: str,
    direction: str,
    message: str,
    key: str,
    *,
    settings: Optional[Settings] = None,
    registry: Optional[EngineRegistry] = None,
) -> MessageTrace:
    """Like `run_cipher`, but splits the message into as many blocks as it needs."""
    req = CipherRequest(algorithm=algorithm, direction=direction, message=message, key=key)
    reg = registry or EngineRegistry()
    return reg.get(req.algorithm).trace_message(req.direction, req.message, req.key, settings=settings)
