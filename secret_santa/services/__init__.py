from secret_santa.services.assignment import (
    AssignmentError,
    SearchResult,
    SearchTimeoutError,
    search_assignment,
)
from secret_santa.services.output import OutputError, resolve_output_dir, write_results
from secret_santa.services.roster import Roster, RosterError, builtin_roster, load_roster

__all__ = [
    "AssignmentError",
    "SearchResult",
    "SearchTimeoutError",
    "search_assignment",
    "OutputError",
    "resolve_output_dir",
    "write_results",
    "Roster",
    "RosterError",
    "builtin_roster",
    "load_roster",
]
