from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Mapping, Sequence, Tuple

from loguru import logger

SUMMARY_FILE_NAME = "details.txt"

BUILTIN_PARTICIPANTS: Tuple[str, ...] = ("p1", "p2", "p3")
BUILTIN_EXCLUSIONS: Dict[str, Tuple[str, ...]] = {
    "p1": ("p2",),
    "p2": ("p3",),
    "p3": (),
}


class RosterError(RuntimeError):
    pass


@dataclass(frozen=True)
class Roster:
    participants: Tuple[str, ...]
    exclusions: Dict[str, FrozenSet[str]]

    def __len__(self) -> int:
        return len(self.participants)


def _check_name(name: str) -> None:
    if not name or name in {".", ".."} or "/" in name or "\\" in name:
        raise RosterError(f"Participant name {name!r} cannot be used as a file name.")
    # exclusion lines and summary pairs are both whitespace-delimited
    if any(ch.isspace() for ch in name):
        raise RosterError(f"Participant name {name!r} must not contain whitespace.")
    if name == SUMMARY_FILE_NAME:
        raise RosterError(f"Participant name {name!r} clashes with the summary file.")


def verify_roster(roster: Roster) -> None:
    known = set(roster.participants)
    for person in roster.participants:
        _check_name(person)
        if person not in roster.exclusions:
            raise RosterError(f"Failed to find {person} in constraints.")
        for other in roster.exclusions[person]:
            if other not in known:
                raise RosterError(f"Failed to find {other} in constraints for {person}.")
    unknown = sorted(set(roster.exclusions) - known)
    if unknown:
        raise RosterError(f"Constraints given for unknown participants: {', '.join(unknown)}.")


def build_roster(
    participants: Sequence[str],
    exclusions: Mapping[str, Iterable[str]],
) -> Roster:
    seen = set()
    for person in participants:
        if person in seen:
            raise RosterError(f"Duplicate participant name: {person}.")
        seen.add(person)

    roster = Roster(
        participants=tuple(participants),
        exclusions={person: frozenset(excluded) for person, excluded in exclusions.items()},
    )
    verify_roster(roster)
    return roster


def builtin_roster() -> Roster:
    return build_roster(BUILTIN_PARTICIPANTS, BUILTIN_EXCLUSIONS)


def parse_roster(lines: Iterable[str]) -> Roster:
    """Parse ``name`` / ``excluded names`` / blank-line records.

    The separator after the last record is optional and trailing blank lines
    are ignored.
    """
    rows = [line.rstrip("\r\n") for line in lines]
    while rows and not rows[-1].strip():
        rows.pop()

    participants: List[str] = []
    exclusions: Dict[str, List[str]] = {}
    for start in range(0, len(rows), 3):
        line_no = start + 1
        name = rows[start].strip()
        if not name:
            raise RosterError(f"Line {line_no}: expected a participant name.")
        if name in exclusions:
            raise RosterError(f"Line {line_no}: duplicate participant name: {name}.")

        excluded = rows[start + 1].split() if start + 1 < len(rows) else []
        if start + 2 < len(rows) and rows[start + 2].strip():
            raise RosterError(f"Line {line_no + 2}: expected a blank line after {name}'s record.")

        participants.append(name)
        exclusions[name] = excluded

    return build_roster(participants, exclusions)


def load_roster(path: Path) -> Roster:
    try:
        with open(path, encoding="utf-8") as fh:
            roster = parse_roster(fh)
    except (OSError, UnicodeDecodeError) as exc:
        raise RosterError(f"Failed to read input file {path}: {exc}") from exc
    logger.bind(path=str(path)).debug("Loaded {count} participants", count=len(roster))
    return roster
