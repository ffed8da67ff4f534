"""Deterministic evaluation of the trace engines.

Provides algebraic unit testing (roundtrip and chain-consistency
verification) and per-step diffusion measurement.

Research / education only. Do NOT use in production.
"""

from .roundtrip import RoundtripResult, RoundtripFailure, run_roundtrip_tests, run_all_algorithms
from .avalanche import DiffusionResult, compute_diffusion, step_diffusion, trace_distances
from .report import EvaluationReport

__all__ = [
    "RoundtripResult",
    "RoundtripFailure",
    "run_roundtrip_tests",
    "run_all_algorithms",
    "DiffusionResult",
    "compute_diffusion",
    "step_diffusion",
    "trace_distances",
    "EvaluationReport",
]
