"""
Command-line entry point.

Usage:
    schedsim [INPUT] [-o OUTPUT] [--stdout] [--compare] [-v | -q]

Example:
    schedsim processes.in            # writes processes.out
    schedsim c2-rr.in --stdout
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .engine import simulate
from .errors import SchedulerError
from .metrics import compare_policies, compute_aggregates
from .models import Config
from .parser import parse_file
from .writer import render_report, write_report

logger = logging.getLogger("schedsim")

# --- Configuration ---
DEFAULT_INPUT_FILE = "processes.in"
OUTPUT_SUFFIX = ".out"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def default_output_path(input_path: Path) -> Path:
    """``processes.in`` -> ``processes.out``; other names get ``.out`` appended."""
    if input_path.suffix == ".in":
        return input_path.with_suffix(OUTPUT_SUFFIX)
    return input_path.with_name(input_path.name + OUTPUT_SUFFIX)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schedsim",
        description="Simulate FCFS, preemptive SJF and Round Robin CPU scheduling.",
    )
    parser.add_argument(
        "input", nargs="?", default=DEFAULT_INPUT_FILE,
        help=f"Process description file (default: {DEFAULT_INPUT_FILE})",
    )
    parser.add_argument(
        "-o", "--output",
        help="Where to write the trace (default: INPUT with an .out suffix)",
    )
    parser.add_argument(
        "--stdout", action="store_true",
        help="Print the trace instead of writing a file",
    )
    parser.add_argument(
        "--compare", action="store_true",
        help="Also log a comparison of all policies on the same processes",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log scheduling decisions")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log warnings and errors")
    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def _log_comparison(config: Config) -> None:
    logger.info("%-32s %12s %15s %10s", "Policy", "Avg Waiting", "Avg Turnaround", "CPU Util")
    for policy, aggregates in compare_policies(config):
        logger.info(
            "%-32s %12.2f %15.2f %9.2f%%",
            policy.display_name,
            aggregates["avg_waiting"],
            aggregates["avg_turnaround"],
            aggregates["cpu_utilization"] * 100,
        )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    input_path = Path(args.input)
    try:
        config = parse_file(input_path)
        result = simulate(config)

        if args.stdout:
            sys.stdout.write(render_report(result))
        else:
            output_path = Path(args.output) if args.output else default_output_path(input_path)
            write_report(output_path, result)
            logger.info("Wrote %s", output_path)

        aggregates = compute_aggregates(result)
        logger.info(
            "%s: %d finished, %d unfinished, avg wait %.2f, avg turnaround %.2f, CPU %.2f%%",
            config.policy.display_name,
            aggregates["finished"],
            aggregates["unfinished"],
            aggregates["avg_waiting"],
            aggregates["avg_turnaround"],
            aggregates["cpu_utilization"] * 100,
        )

        if args.compare:
            _log_comparison(config)
    except SchedulerError as exc:
        logger.error("Input error: %s", exc)
        return 1
    except OSError as exc:
        logger.error("File error: %s", exc)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
