#!/usr/bin/env python3
"""Verify cexp wiring (configuration, instance reachability, compile round trip)."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure local src/ is on sys.path when running via `uv run scripts/...`
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from cexp.api import CompilerExplorerError, Filters
from cexp.compilation import build_compile_job
from cexp.state import build_state


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional path to config TOML (defaults to search order)",
    )
    parser.add_argument(
        "--compiler",
        default="g132",
        help="Compiler id used for the compile round trip",
    )
    args = parser.parse_args()

    state = build_state(args.config)
    errors: list[str] = []
    warnings: list[str] = []
    languages = compilers = 0

    with state.client:
        try:
            languages = len(state.client.languages())
            compilers = len(state.client.compilers())
        except CompilerExplorerError as exc:
            errors.append(f"Instance unreachable: {exc}")
        else:
            try:
                job = build_compile_job("int main() { return 0; }", "", Filters.default(), lang="c++")
                result = state.client.compile(args.compiler, job)
                if not result.succeeded:
                    warnings.append(f"Compiler {args.compiler} returned code {result.code}")
            except CompilerExplorerError as exc:
                errors.append(f"Compile round trip failed: {exc}")

    print("cexp setup check\n================")
    print(f"- Instance: {state.config.api.base_url}")
    print(f"- Timeout: {state.config.api.timeout}s")
    print(f"- Languages: {languages}")
    print(f"- Compilers: {compilers}")

    if warnings:
        print("\nWarnings:")
        for warning in warnings:
            print(f"  • {warning}")

    if errors:
        print("\nErrors:")
        for error in errors:
            print(f"  • {error}")
        return 1

    print("\nAll required components look good!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
