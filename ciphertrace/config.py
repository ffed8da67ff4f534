from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, Field


class Settings(BaseModel):
    # Decrypt input handling
    strict_hex: bool = Field(
        default=False,
        description="Reject decrypt input that is not clean hex of exactly one block",
    )
    decrypt_fallback: bool = Field(
        default=False,
        description="Re-encrypt the message as text when its hex is inconsistent with the block size",
    )

    # Evaluation
    global_seed: int = Field(default=1337)
    roundtrip_vectors: int = Field(default=200, ge=1, le=100_000)
    avalanche_trials: int = Field(default=64, ge=1, le=10_000)

    # Scripts
    log_level: str = Field(default="INFO")
    runs_dir: str = Field(default="runs")


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    # Load .env if present
    load_dotenv()

    def _bool(name: str, default: bool) -> bool:
        v = os.getenv(name)
        if v is None:
            return default
        return v.strip().lower() in {"1", "true", "yes", "y", "on"}

    return Settings(
        strict_hex=_bool("STRICT_HEX", False),
        decrypt_fallback=_bool("DECRYPT_FALLBACK", False),
        global_seed=int(os.getenv("GLOBAL_SEED", "1337")),
        roundtrip_vectors=int(os.getenv("ROUNDTRIP_VECTORS", "200")),
        avalanche_trials=int(os.getenv("AVALANCHE_TRIALS", "64")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        runs_dir=os.getenv("RUNS_DIR", "runs"),
    )
