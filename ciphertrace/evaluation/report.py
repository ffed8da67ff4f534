"""Structured evaluation report builder.

Aggregates roundtrip and diffusion results into a single serializable
report for export and console display.

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List

from .avalanche import DiffusionResult
from .roundtrip import RoundtripResult


@dataclass
class EvaluationReport:
    """Complete evaluation report aggregating all analysis results."""
    timestamp: str = ""
    roundtrip_results: List[RoundtripResult] = field(default_factory=list)
    diffusion_results: List[DiffusionResult] = field(default_factory=list)

    def __post_init__(self):
        if not self.timestamp:
            self.timestamp = datetime.now(timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        """Serialize full report for JSON export."""
        return {
            "timestamp": self.timestamp,
            "roundtrip": [r.to_dict() for r in self.roundtrip_results],
            "diffusion": [d.to_dict() for d in self.diffusion_results],
            "summary": {
                "total_algorithms_tested": len(self.roundtrip_results),
                "roundtrip_all_pass": all(r.is_perfect for r in self.roundtrip_results),
                "diffusion_all_pass": all(d.passes for d in self.diffusion_results),
                "failing_algorithms": self.failing_algorithms(),
                "weak_diffusion_algorithms": self.weak_diffusion_algorithms(),
            },
        }

    def to_summary(self) -> str:
        """Human-readable summary for console display."""
        lines = [f"Evaluation Report - {self.timestamp}", "=" * 50]

        if self.roundtrip_results:
            rt_pass = sum(1 for r in self.roundtrip_results if r.is_perfect)
            rt_total = len(self.roundtrip_results)
            lines.append(f"\nRoundtrip Tests: {rt_pass}/{rt_total} algorithms pass")
            for r in self.roundtrip_results:
                lines.append(f"  {r.summary()}")

        if self.diffusion_results:
            d_pass = sum(1 for d in self.diffusion_results if d.passes)
            d_total = len(self.diffusion_results)
            lines.append(f"\nDiffusion: {d_pass}/{d_total} pass")
            for d in self.diffusion_results:
                lines.append(f"  {d.summary()}")

        return "\n".join(lines)

    def failing_algorithms(self) -> List[str]:
        """Return names of algorithms with roundtrip failures."""
        return [r.algorithm_name for r in self.roundtrip_results if not r.is_perfect]

    def weak_diffusion_algorithms(self) -> List[str]:
        return sorted({d.algorithm_name for d in self.diffusion_results if not d.passes})
