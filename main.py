from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .src import FunctionSchemaGenerator, RuntimeConfig, SchemaError
from .src.config import LOG_LEVELS

# Load GO2SCHEMA_* defaults from a .env file in the working directory
load_dotenv()


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    defaults = RuntimeConfig.from_env()
    parser = argparse.ArgumentParser(
        description="Generate a JSON Schema function definition from a Go function",
    )

    parser.add_argument(
        "--src",
        type=Path,
        default=defaults.src_dir,
        help="The directory to scan for Go source files (default: current directory)",
    )
    parser.add_argument(
        "--func",
        required=True,
        dest="func_name",
        help="The name of the function to generate the definition for",
    )
    parser.add_argument(
        "--output",
        default=defaults.output,
        help="Where to write the JSON; '-' for standard output (default: -)",
    )
    parser.add_argument(
        "--log-level",
        default=defaults.log_level,
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        default=defaults.translator.include_tests,
        help="Also scan *_test.go files",
    )
    parser.add_argument(
        "--no-flatten",
        action="store_true",
        help="Keep the wrapping object for single-parameter functions",
    )

    args = parser.parse_args(argv)
    if not args.func_name:
        parser.error("--func must not be empty")
    # argparse does not check defaults against choices
    if args.log_level not in LOG_LEVELS:
        parser.error(f"invalid GO2SCHEMA_LOG_LEVEL {args.log_level!r} (choose from {', '.join(LOG_LEVELS)})")
    args.defaults = defaults
    return args


def build_runtime(args: argparse.Namespace) -> RuntimeConfig:
    runtime: RuntimeConfig = args.defaults
    runtime.src_dir = args.src
    runtime.output = args.output
    runtime.log_level = args.log_level
    runtime.translator.include_tests = args.include_tests
    if args.no_flatten:
        runtime.translator.flatten_single_parameter = False
    return runtime


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    runtime = build_runtime(args)
    logging.basicConfig(
        level=runtime.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    generator = FunctionSchemaGenerator(runtime)
    try:
        details = generator.generate(args.func_name)
    except SchemaError as e:
        print(f"Error parsing function: {e}", file=sys.stderr)
        return 1

    try:
        generator.write(details)
    except OSError as e:
        print(f"Error writing JSON to {runtime.output}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
