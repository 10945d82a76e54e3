"""Command-line entry point: ``python -m genai_tokens [SAMPLE ...]``."""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from genai_tokens.samples import SAMPLES, run_all


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genai_tokens",
        description="Run the Gemini token counting samples in order.",
    )
    parser.add_argument(
        "samples",
        nargs="*",
        metavar="SAMPLE",
        help=f"samples to run (default: all). Choices: {', '.join(SAMPLES)}",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="logging level for the client library (default: WARNING)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    unknown = [s for s in args.samples if s not in SAMPLES]
    if unknown:
        parser.error(f"unknown sample(s): {', '.join(unknown)}")

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    run_all(names=args.samples or None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
