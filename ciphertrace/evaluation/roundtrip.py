"""Algebraic unit testing: roundtrip verification P = D(E(P, K), K).

Generates randomized test vectors per algorithm, runs both traces, and checks
that decryption inverts encryption and that every trace is chain consistent
(each step starts where the previous one ended).

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass, field, asdict
from typing import Any, Callable, Dict, List, Optional

from ciphertrace.cipher.registry import EngineRegistry

logger = logging.getLogger(__name__)


@dataclass
class RoundtripFailure:
    """Details of a single failed roundtrip test vector."""
    vector_index: int
    plaintext_hex: str
    key_hex: str
    ciphertext_hex: str
    decrypted_hex: str       # What decrypt returned (should equal plaintext)
    chain_consistent: bool
    error: Optional[str]     # Exception message if decrypt/encrypt threw


@dataclass
class RoundtripResult:
    """Aggregate result of roundtrip testing for one algorithm."""
    algorithm_name: str
    block_size_bits: int
    key_size_bits: int
    rounds: int
    total_vectors: int
    passed: int
    failed: int
    chain_breaks: int = 0
    failures: List[RoundtripFailure] = field(default_factory=list)
    elapsed_seconds: float = 0.0
    seed: int = 1337

    @property
    def success_rate(self) -> float:
        return self.passed / self.total_vectors if self.total_vectors > 0 else 0.0

    @property
    def is_perfect(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def summary(self) -> str:
        status = "PASS" if self.is_perfect else "FAIL"
        return (
            f"[{status}] {self.algorithm_name}: "
            f"{self.passed}/{self.total_vectors} vectors passed, "
            f"{self.chain_breaks} chain break(s) "
            f"({self.elapsed_seconds:.2f}s)"
        )


def _rand_bytes(rng: random.Random, n: int) -> bytes:
    return bytes(rng.randrange(0, 256) for _ in range(n))


def run_roundtrip_tests(
    algorithm: str,
    *,
    num_vectors: int = 200,
    seed: int = 1337,
    max_failures_recorded: int = 10,
    registry: Optional[EngineRegistry] = None,
) -> RoundtripResult:
    """Run roundtrip verification across many random (plaintext, key) pairs.

    Args:
        algorithm: Registered engine name ("AES" or "DES").
        num_vectors: Number of random (plaintext, key) pairs to test.
        seed: Random seed for deterministic reproducibility.
        max_failures_recorded: Maximum number of failure details to keep.
        registry: Optional engine registry; uses default if not provided.

    Returns:
        RoundtripResult with pass/fail counts and failure details.
    """
    reg = registry or EngineRegistry()
    engine = reg.get(algorithm)

    rng = random.Random(seed)
    passed = 0
    failed = 0
    chain_breaks = 0
    failures: List[RoundtripFailure] = []

    start = time.perf_counter()

    for i in range(num_vectors):
        pt = _rand_bytes(rng, engine.block_size)
        key = _rand_bytes(rng, engine.key_size)

        try:
            enc = engine.encrypt_with_trace(pt, key)
            dec = engine.decrypt_with_trace(enc.output, key)
            chained = enc.is_chain_consistent() and dec.is_chain_consistent()
            if not chained:
                chain_breaks += 1

            if dec.output == pt and chained:
                passed += 1
            else:
                failed += 1
                if len(failures) < max_failures_recorded:
                    failures.append(RoundtripFailure(
                        vector_index=i,
                        plaintext_hex=pt.hex(),
                        key_hex=key.hex(),
                        ciphertext_hex=enc.output.hex(),
                        decrypted_hex=dec.output.hex(),
                        chain_consistent=chained,
                        error=None,
                    ))
        except Exception as exc:
            failed += 1
            logger.error("%s vector %d raised: %s", engine.name, i, exc)
            if len(failures) < max_failures_recorded:
                failures.append(RoundtripFailure(
                    vector_index=i,
                    plaintext_hex=pt.hex(),
                    key_hex=key.hex(),
                    ciphertext_hex="<error>",
                    decrypted_hex="<error>",
                    chain_consistent=False,
                    error=str(exc),
                ))

    elapsed = time.perf_counter() - start

    return RoundtripResult(
        algorithm_name=engine.name,
        block_size_bits=engine.block_size * 8,
        key_size_bits=engine.key_size * 8,
        rounds=engine.rounds,
        total_vectors=num_vectors,
        passed=passed,
        failed=failed,
        chain_breaks=chain_breaks,
        failures=failures,
        elapsed_seconds=round(elapsed, 4),
        seed=seed,
    )


def run_all_algorithms(
    *,
    num_vectors: int = 200,
    seed: int = 1337,
    progress_callback: Optional[Callable[[str, int, int], None]] = None,
) -> List[RoundtripResult]:
    """Run roundtrip tests for every registered engine.

    Args:
        num_vectors: Number of test vectors per algorithm.
        seed: Random seed for reproducibility.
        progress_callback: Optional callback(algo_name, current_index, total).

    Returns:
        List of RoundtripResult sorted by algorithm name.
    """
    registry = EngineRegistry()
    names = registry.names()
    results: List[RoundtripResult] = []

    for idx, name in enumerate(names):
        if progress_callback:
            progress_callback(name, idx, len(names))

        result = run_roundtrip_tests(
            name,
            num_vectors=num_vectors,
            seed=seed,
            registry=registry,
        )
        logger.info(result.summary())
        results.append(result)

    return sorted(results, key=lambda r: r.algorithm_name)
