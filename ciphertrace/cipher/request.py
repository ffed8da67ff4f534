from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, field_validator


Algorithm = Literal["AES", "DES"]
DirectionName = Literal["encrypt", "decrypt"]


class CipherRequest(BaseModel):
    """One "animate this cipher" request as it arrives from the outside.

    `message` is raw text when encrypting and hex ciphertext when decrypting;
    `key` is always raw text. Both are padded or truncated to the block size
    by the engine, never rejected here.
    """

    algorithm: Algorithm
    direction: DirectionName = Field(default="encrypt")
    message: str = Field(default="")
    key: str = Field(default="")

    @field_validator("algorithm", mode="before")
    @classmethod
    def _upper_algorithm(cls, v: str) -> str:
        return v.strip().upper() if isinstance(v, str) else v

    @field_validator("direction", mode="before")
    @classmethod
    def _lower_direction(cls, v: str) -> str:
        return v.strip().lower() if isinstance(v, str) else v
