"""Print or export the step trace of one AES or DES run.

Usage:
    python scripts/run_trace.py --algorithm AES --message "HELLO AES WORLD!" --key MYSECRETKEY12345
    python scripts/run_trace.py --algorithm DES --direction decrypt --message 0123456789ABCDEF --key SECRETKY
    python scripts/run_trace.py --algorithm AES --message "..." --key "..." --step 12      # one step
    python scripts/run_trace.py --algorithm DES --message "LONG MESSAGE" --key K --all-blocks
    python scripts/run_trace.py --algorithm AES --message "..." --key "..." --json out.json

Research / education only. Do NOT use in production.
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

# Ensure project root is on path
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

from ciphertrace.cipher.codec import InvalidInputError, state_to_hex_rows
from ciphertrace.cipher.registry import run_cipher, trace_message
from ciphertrace.cipher.trace import Step, state_hex
from ciphertrace.config import load_settings
from ciphertrace.utils.repro import make_run_dir, write_json


def _print_step(index: int, step: Step) -> None:
    print(f"[{index:2d}] {step.name}")
    print(f"     {step.description}")
    if step.state_before and isinstance(step.state_before[0], tuple):
        before = state_to_hex_rows(step.state_before)
        after = state_to_hex_rows(step.state_after)
        for b, a in zip(before, after):
            print(f"     {b}   ->   {a}")
    else:
        print(f"     {state_hex(step.state_before)} -> {state_hex(step.state_after)}")
    if step.feistel is not None:
        f = step.feistel.to_dict()
        print(f"     K={f['subkey']} E(R)={f['expanded']} xor={f['xored']}")
        print(f"     S={' '.join(f['sbox_outputs'])} f={f['output']}")
    elif step.round_key is not None:
        print(f"     round key {state_hex(step.round_key)}")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Step-by-step AES-128 / DES trace",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--algorithm", "-a", required=True,
        help="AES or DES",
    )
    parser.add_argument(
        "--direction", "-d", default="encrypt",
        help="encrypt (message is text) or decrypt (message is hex)",
    )
    parser.add_argument(
        "--message", "-m", required=True,
        help="Plaintext text or ciphertext hex",
    )
    parser.add_argument(
        "--key", "-k", required=True,
        help="Key text (padded/truncated to the block size)",
    )
    parser.add_argument(
        "--step", type=int, default=None,
        help="Show only this step index (negative counts from the end)",
    )
    parser.add_argument(
        "--all-blocks", action="store_true",
        help="Trace every block of a longer message instead of the first one",
    )
    parser.add_argument(
        "--json", type=str, default=None, metavar="PATH",
        help="Write the full trace as JSON to PATH",
    )
    parser.add_argument(
        "--save", action="store_true",
        help="Write the trace as JSON into a new timestamped run directory",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()
    settings = load_settings()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        if args.all_blocks:
            result = trace_message(
                args.algorithm, args.direction, args.message, args.key, settings=settings,
            )
        else:
            result = run_cipher(
                args.algorithm, args.direction, args.message, args.key, settings=settings,
            )
    except (InvalidInputError, ValidationError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(2)

    steps = result.steps
    if args.step is not None:
        if not -len(steps) <= args.step < len(steps):
            print(f"ERROR: step must be in [0, {len(steps) - 1}]", file=sys.stderr)
            sys.exit(2)
        index = args.step % len(steps)
        _print_step(index, steps[index])
    else:
        for i, step in enumerate(steps):
            _print_step(i, step)

    print(f"\nOutput (hex):  {result.output_hex}")
    print(f"Output (text): {result.output_text!r}")

    if args.json:
        write_json(args.json, result.to_dict())
        print(f"Trace written to {args.json}")

    if args.save:
        paths = make_run_dir(settings.runs_dir, f"{args.algorithm}_{args.direction}")
        write_json(paths.trace_json, result.to_dict())
        print(f"Trace saved to: {paths.trace_json}")


if __name__ == "__main__":
    main()
