#!/usr/bin/env python3
# Copyright 2026 ProtoMark Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI checks locally: format, lint, type check, tests, and build.

Steps can be skipped by name, e.g. ``tools/ci.py --skip build --skip types``.
"""

import argparse
import subprocess
import sys
import time
from dataclasses import dataclass
from pathlib import Path

from yachalk import chalk

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class Step:
    key: str
    title: str
    command: list[str]


STEPS: list[Step] = [
    Step("format", "Format check", ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"]),
    Step("lint", "Lint", ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"]),
    Step("types", "Type check", ["uv", "run", "ty", "check", "src/"]),
    Step("tests", "Tests", ["uv", "run", "pytest", "--cov=protomark", "--cov-report=term-missing"]),
    Step("build", "Build", ["uv", "build"]),
]


def main() -> int:
    """Run the selected CI steps and print a summary."""
    parser = argparse.ArgumentParser(description="Run ProtoMark CI checks locally.")
    parser.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=[step.key for step in STEPS],
        help="Skip a step (may be repeated)",
    )
    parser.add_argument("--fail-fast", action="store_true", help="Stop after the first failing step")
    args = parser.parse_args()

    results: list[tuple[Step, bool, float]] = []
    for step in STEPS:
        if step.key in args.skip:
            continue
        passed, elapsed = _run(step)
        results.append((step, passed, elapsed))
        if not passed and args.fail_fast:
            break

    _print_summary(results)
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_RULE = "=" * 60


def _run(step: Step) -> tuple[bool, float]:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue(step.title))
    print(chalk.blue(_RULE))
    start = time.monotonic()
    proc = subprocess.run(step.command, cwd=Path(__file__).resolve().parent.parent)
    return proc.returncode == 0, time.monotonic() - start


def _print_summary(results: list[tuple[Step, bool, float]]) -> None:
    print(f"\n{chalk.blue(_RULE)}")
    print(chalk.blue("  Summary"))
    print(chalk.blue(_RULE))
    for step, passed, elapsed in results:
        color = chalk.green if passed else chalk.red
        status = "PASS" if passed else "FAIL"
        print(color(f"  {status}  {step.title} ({elapsed:.1f}s)"))
    print()


if __name__ == "__main__":
    sys.exit(main())
