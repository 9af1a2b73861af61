from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from loguru import logger

from secret_santa.services.assignment import SearchResult, total_permutations
from secret_santa.services.roster import SUMMARY_FILE_NAME

PAIR_SEPARATOR = " -> "


class OutputError(RuntimeError):
    pass


def resolve_output_dir(arg: Optional[str]) -> Path:
    if arg is None:
        try:
            return Path.cwd()
        except OSError as exc:
            raise OutputError(f"Failed to get current working directory: {exc}") from exc

    directory = Path(arg)
    if directory.exists():
        raise OutputError(f"Directory {directory} already exists.")
    return directory


def create_output_dir(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=False)
    except FileExistsError as exc:
        raise OutputError(f"Directory {directory} already exists.") from exc
    except OSError as exc:
        raise OutputError(f"Failed to create directory {directory}: {exc}") from exc
    logger.info("Created directory: {path}", path=str(directory))


def _write_file(path: Path, text: str) -> None:
    try:
        with open(path, "x", encoding="utf-8") as fh:
            fh.write(text)
    except OSError as exc:
        raise OutputError(f"FAILED TO OPEN FILE: {path}: {exc}") from exc


def format_summary(participants: Sequence[str], result: SearchResult) -> str:
    lines = [f"{giver}{PAIR_SEPARATOR}{receiver}" for giver, receiver in result.pairs(participants)]
    lines += [
        "",
        f"Number of people: {len(participants)}",
        f"Total permutations: {total_permutations(len(participants))}",
        "",
        f"Global search time: {result.elapsed * 1000} ms",
        f"Number of failed searches: {result.failures}",
    ]
    return "\n".join(lines) + "\n"


def write_results(
    directory: Path,
    participants: Sequence[str],
    result: SearchResult,
    create: bool = True,
) -> Path:
    if create:
        create_output_dir(directory)

    for giver, receiver in result.pairs(participants):
        _write_file(directory / giver, f"{receiver}\n")

    summary_path = directory / SUMMARY_FILE_NAME
    _write_file(summary_path, format_summary(participants, result))
    logger.bind(directory=str(directory)).debug("Wrote {count} assignment files", count=len(participants))
    return summary_path


def read_summary(path: Path) -> List[Tuple[str, str]]:
    pairs: List[Tuple[str, str]] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            line = line.rstrip("\n")
            if not line:
                break
            giver, sep, receiver = line.partition(PAIR_SEPARATOR)
            if not sep:
                raise OutputError(f"Malformed assignment line in {path}: {line!r}")
            pairs.append((giver, receiver))
    return pairs
