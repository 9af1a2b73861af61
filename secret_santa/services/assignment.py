from __future__ import annotations

import enum
import math
import random
import time
from dataclasses import dataclass
from typing import Callable, Collection, List, Mapping, Optional, Sequence, Tuple

from loguru import logger

Assignment = Tuple[int, ...]
Clock = Callable[[], float]

DEFAULT_ATTEMPT_TIMEOUT = 0.1
DEFAULT_SEARCH_TIMEOUT = 60.0


class AssignmentError(RuntimeError):
    pass


class SearchTimeoutError(AssignmentError):
    def __init__(self, failures: int, elapsed: float) -> None:
        super().__init__(
            f"TIMEOUT! Failed to find permutation after {failures} failed searches "
            f"in {elapsed:.3f} s."
        )
        self.failures = failures
        self.elapsed = elapsed


class SearchState(str, enum.Enum):
    SEARCHING = "searching"
    ACCEPTED = "accepted"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class SearchResult:
    assignment: Assignment
    elapsed: float
    failures: int

    def pairs(self, participants: Sequence[str]) -> List[Tuple[str, str]]:
        return [
            (participants[giver], participants[receiver])
            for giver, receiver in enumerate(self.assignment)
        ]


def total_permutations(n: int) -> int:
    return math.factorial(n)


def can_give(
    i: int,
    j: int,
    participants: Sequence[str],
    exclusions: Mapping[str, Collection[str]],
) -> bool:
    n = len(participants)
    if not (0 <= i < n and 0 <= j < n):
        return False
    if i == j:
        return False
    return participants[j] not in exclusions.get(participants[i], ())


def check_feasible(
    participants: Sequence[str],
    exclusions: Mapping[str, Collection[str]],
) -> None:
    n = len(participants)
    if n < 2:
        raise AssignmentError("At least 2 participants are required.")
    stuck = [
        participants[i]
        for i in range(n)
        if not any(can_give(i, j, participants, exclusions) for j in range(n))
    ]
    if stuck:
        raise AssignmentError(
            "Assignment constraints are too strict to satisfy: "
            + ", ".join(stuck)
            + " cannot give to anyone."
        )


def generate_candidate(
    n: int,
    participants: Sequence[str],
    exclusions: Mapping[str, Collection[str]],
    timeout: float,
    rng: random.Random,
    clock: Clock = time.monotonic,
) -> Optional[List[int]]:
    """Draw one candidate by unguided rejection sampling.

    Position ``i`` keeps drawing uniformly from ``[0, n)`` until it hits an
    unused, admissible recipient. Committed positions are never revisited, so
    a prefix can leave no admissible choice for a later position; the attempt
    then runs out its ``timeout`` and returns ``None``.
    """
    if n < 2:
        raise AssignmentError("At least 2 participants are required.")

    candidate: List[int] = []
    used = set()
    started = clock()
    i = 0
    while i < n:
        if clock() - started > timeout:
            return None
        j = rng.randrange(n)
        if j not in used and can_give(i, j, participants, exclusions):
            candidate.append(j)
            used.add(j)
            i += 1
    return candidate


def verify_assignment(
    assignment: Sequence[int],
    participants: Sequence[str],
    exclusions: Mapping[str, Collection[str]],
) -> bool:
    n = len(participants)
    log = logger.bind(assignment=list(assignment))

    if len(assignment) != n:
        log.warning("Assignment has {size} positions for {n} participants", size=len(assignment), n=n)
        return False
    if sorted(assignment) != list(range(n)):
        missing = sorted(set(range(n)) - set(assignment))
        log.warning(
            "Assignment is not a permutation, missing: {missing}",
            missing=[participants[i] for i in missing],
        )
        return False

    for i, j in enumerate(assignment):
        if not can_give(i, j, participants, exclusions):
            log.warning("{giver} cannot give to {receiver}", giver=participants[i], receiver=participants[j])
            return False

    for i, j in enumerate(assignment):
        if assignment[j] == i:
            log.trace("2-cycle between {a} and {b}", a=participants[i], b=participants[j])
            return False

    return True


def search_assignment(
    participants: Sequence[str],
    exclusions: Mapping[str, Collection[str]],
    attempt_timeout: float = DEFAULT_ATTEMPT_TIMEOUT,
    search_timeout: float = DEFAULT_SEARCH_TIMEOUT,
    rng: Optional[random.Random] = None,
    clock: Clock = time.monotonic,
) -> SearchResult:
    n = len(participants)
    check_feasible(participants, exclusions)
    if rng is None:
        rng = random.Random(time.time_ns())

    state = SearchState.SEARCHING
    candidate: Optional[List[int]] = None
    failures = 0
    started = clock()

    while state == SearchState.SEARCHING:
        candidate = generate_candidate(n, participants, exclusions, attempt_timeout, rng, clock)
        if candidate is not None and verify_assignment(candidate, participants, exclusions):
            state = SearchState.ACCEPTED
            continue
        failures += 1
        if clock() - started > search_timeout:
            state = SearchState.TIMED_OUT

    elapsed = clock() - started
    if state == SearchState.TIMED_OUT:
        raise SearchTimeoutError(failures, elapsed)

    logger.bind(participants=n, failures=failures).info(
        "Assignment found in {elapsed:.3f} s", elapsed=elapsed
    )
    return SearchResult(assignment=tuple(candidate), elapsed=elapsed, failures=failures)
