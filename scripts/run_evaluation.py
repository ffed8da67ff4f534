"""Roundtrip and diffusion evaluation of every registered engine.

Usage:
    python scripts/run_evaluation.py                       # defaults from settings
    python scripts/run_evaluation.py --vectors 1000 --trials 128
    python scripts/run_evaluation.py --algorithms DES --skip-diffusion

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from ciphertrace.cipher.registry import EngineRegistry
from ciphertrace.config import load_settings
from ciphertrace.evaluation import EvaluationReport, compute_diffusion, run_roundtrip_tests
from ciphertrace.utils.repro import make_run_dir, set_global_seed, write_json


def _cli_progress(message: str, current: int, total: int) -> None:
    """Print progress to stderr."""
    pct = (current / total * 100) if total > 0 else 0
    print(f"  [{current + 1}/{total}] ({pct:.0f}%) {message}", file=sys.stderr)


def main() -> None:
    settings = load_settings()

    parser = argparse.ArgumentParser(description="Trace engine evaluation")
    parser.add_argument(
        "--algorithms", nargs="+", default=None,
        help="Algorithm names to evaluate (default: all registered)",
    )
    parser.add_argument(
        "--vectors", type=int, default=settings.roundtrip_vectors,
        help=f"Roundtrip vectors per algorithm (default: {settings.roundtrip_vectors})",
    )
    parser.add_argument(
        "--trials", type=int, default=settings.avalanche_trials,
        help=f"Diffusion trials per input type (default: {settings.avalanche_trials})",
    )
    parser.add_argument(
        "--seed", type=int, default=settings.global_seed,
        help=f"Random seed (default: {settings.global_seed})",
    )
    parser.add_argument(
        "--output-dir", type=str, default=settings.runs_dir,
        help=f"Output directory (default: {settings.runs_dir})",
    )
    parser.add_argument(
        "--skip-diffusion", action="store_true",
        help="Only run roundtrip tests",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    set_global_seed(args.seed)

    registry = EngineRegistry()
    names = [n.upper() for n in args.algorithms] if args.algorithms else registry.names()
    unknown = [n for n in names if not registry.exists(n)]
    if unknown:
        print(f"ERROR: unknown algorithm(s): {', '.join(unknown)}", file=sys.stderr)
        sys.exit(2)

    report = EvaluationReport()
    for idx, name in enumerate(names):
        _cli_progress(f"{name} roundtrip", idx, len(names))
        report.roundtrip_results.append(run_roundtrip_tests(
            name, num_vectors=args.vectors, seed=args.seed, registry=registry,
        ))
        if not args.skip_diffusion:
            for input_type in ("plaintext", "key"):
                _cli_progress(f"{name} diffusion ({input_type})", idx, len(names))
                report.diffusion_results.append(compute_diffusion(
                    name, input_type=input_type, trials=args.trials,
                    seed=args.seed, registry=registry,
                ))

    print(report.to_summary())

    paths = make_run_dir(args.output_dir, "evaluation")
    write_json(paths.report_json, report.to_dict())
    print(f"\nReport saved to: {paths.report_json}")

    if report.failing_algorithms():
        sys.exit(1)


if __name__ == "__main__":
    main()
