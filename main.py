from __future__ import annotations

import argparse
import random
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from secret_santa.core.config import load_settings
from secret_santa.core.logging import setup_logging
from secret_santa.services import (
    AssignmentError,
    OutputError,
    RosterError,
    builtin_roster,
    load_roster,
    resolve_output_dir,
    search_assignment,
    write_results,
)

EXIT_SUCCESS = 0
EXIT_FAILURE = 1

USAGE = """\
secret-santa --help: display this message.
secret-santa: writes secret Santas to the current directory.
secret-santa <output dir>: writes secret Santas to the given directory if it doesn't exist.
secret-santa <input file> <output dir>: reads participants from the input file and
    writes secret Santas to the given directory if it doesn't exist."""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="secret-santa", usage=USAGE, add_help=False)
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    parser.add_argument("paths", nargs="*")
    return parser


def print_usage() -> None:
    print("Usage:")
    print(USAGE)


def holds_log_file(output_dir: Path, log_path: str) -> bool:
    if not log_path:
        return False
    log_dir = Path(log_path).resolve().parent
    return output_dir.resolve() in (log_dir, *log_dir.parents)


def main(argv: Optional[Sequence[str]] = None) -> int:
    try:
        settings = load_settings()
    except ValueError as exc:
        logger.error("Invalid configuration: {error}", error=str(exc))
        return EXIT_FAILURE

    args, unknown = build_parser().parse_known_args(argv)
    if args.show_help or unknown or len(args.paths) > 2:
        print_usage()
        return EXIT_FAILURE

    input_path = Path(args.paths[0]) if len(args.paths) == 2 else None
    output_arg = args.paths[-1] if args.paths else None

    # the file sink creates its directory, so the output directory is checked first
    try:
        output_dir = resolve_output_dir(output_arg)
    except OutputError as exc:
        logger.error("{error}", error=str(exc))
        return EXIT_FAILURE
    if output_arg is not None and holds_log_file(output_dir, settings.log_path):
        logger.error(
            "Output directory {path} would contain the log file {log_path}, set LOG_PATH elsewhere.",
            path=str(output_dir),
            log_path=settings.log_path,
        )
        return EXIT_FAILURE

    try:
        setup_logging(settings.log_level, settings.log_path)
    except ValueError as exc:
        logger.error("Invalid configuration: {error}", error=str(exc))
        return EXIT_FAILURE

    try:
        roster = load_roster(input_path) if input_path else builtin_roster()
    except RosterError as exc:
        logger.error("Verifying constraints failed: {error}", error=str(exc))
        return EXIT_FAILURE

    seed = settings.seed if settings.seed is not None else time.time_ns()
    logger.bind(seed=seed).debug("Random source seeded")

    try:
        result = search_assignment(
            roster.participants,
            roster.exclusions,
            attempt_timeout=settings.attempt_timeout_ms / 1000,
            search_timeout=settings.search_timeout_s,
            rng=random.Random(seed),
        )
    except AssignmentError as exc:
        logger.error("{error}", error=str(exc))
        return EXIT_FAILURE

    try:
        write_results(output_dir, roster.participants, result, create=output_arg is not None)
    except OutputError as exc:
        logger.error("{error}", error=str(exc))
        return EXIT_FAILURE

    logger.info("DONE!")
    return EXIT_SUCCESS


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
