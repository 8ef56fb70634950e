"""Command line entry point for the random generator checker."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .app import RandomGeneratorCheckerApp
from .errors import CheckExecutionError, InvalidConfigurationError, MissingFileError

EXIT_SUCCESS = 0
EXIT_UNEXPECTED_ERROR = 1
EXIT_MISSING_FILE = 2
EXIT_INVALID_CONFIG = 3
EXIT_CHECK_ERROR = 4
EXIT_VALIDATION_FAILED = 5


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rngcheck",
        description="Validate the statistical output of a buffer-filling random generator.",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        help="Optional path to the INI configuration file describing the run.",
    )
    parser.add_argument(
        "--iterations",
        "-n",
        type=int,
        help="Number of randomised test cases to run (default 500).",
    )
    parser.add_argument(
        "--seed",
        "-s",
        type=int,
        help="Seed of the source drawing test case parameters.",
    )
    parser.add_argument(
        "--generator-seed",
        type=int,
        help="Seed passed to the generator factory.",
    )
    parser.add_argument(
        "--generator",
        "-g",
        help="Generator factory as 'package.module:callable'; defaults to the numpy reference generator.",
    )
    parser.add_argument(
        "--report",
        "-r",
        type=Path,
        help="Optional path where a markdown report will be written.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print every failing iteration with its diagnostic.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    app = RandomGeneratorCheckerApp()
    try:
        result = app.run(
            config_path=args.config,
            iterations=args.iterations,
            seed=args.seed,
            generator_seed=args.generator_seed,
            generator=args.generator,
            report_path=args.report,
            verbose=args.verbose,
        )
    except MissingFileError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_MISSING_FILE
    except InvalidConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG
    except CheckExecutionError as exc:
        print(f"Check execution failed: {exc}", file=sys.stderr)
        return EXIT_CHECK_ERROR
    except Exception as exc:  # pragma: no cover - top level guard
        print(f"Unexpected error: {exc}", file=sys.stderr)
        return EXIT_UNEXPECTED_ERROR
    return EXIT_SUCCESS if result.passed else EXIT_VALIDATION_FAILED


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
