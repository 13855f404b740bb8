#!/usr/bin/env python3
"""
Match status lifecycle.

    matched -> viewed -> contacted -> shortlisted | rejected | hired
    shortlisted -> interviewing | rejected | hired
    interviewing -> rejected | hired

Forward-only: anything not listed in ALLOWED_TRANSITIONS is rejected.
rejected and hired are terminal.
"""

from enum import Enum
from typing import Dict, FrozenSet


class MatchStatus(str, Enum):
    MATCHED = "matched"
    VIEWED = "viewed"
    CONTACTED = "contacted"
    SHORTLISTED = "shortlisted"
    INTERVIEWING = "interviewing"
    REJECTED = "rejected"
    HIRED = "hired"


ALLOWED_TRANSITIONS: Dict[MatchStatus, FrozenSet[MatchStatus]] = {
    MatchStatus.MATCHED: frozenset({MatchStatus.VIEWED}),
    MatchStatus.VIEWED: frozenset({MatchStatus.CONTACTED}),
    MatchStatus.CONTACTED: frozenset({
        MatchStatus.SHORTLISTED, MatchStatus.REJECTED, MatchStatus.HIRED
    }),
    MatchStatus.SHORTLISTED: frozenset({
        MatchStatus.INTERVIEWING, MatchStatus.REJECTED, MatchStatus.HIRED
    }),
    MatchStatus.INTERVIEWING: frozenset({MatchStatus.REJECTED, MatchStatus.HIRED}),
    MatchStatus.REJECTED: frozenset(),
    MatchStatus.HIRED: frozenset(),
}

TERMINAL_STATUSES = frozenset(s for s, targets in ALLOWED_TRANSITIONS.items() if not targets)

ALL_STATUSES = tuple(s.value for s in MatchStatus)


def parse_status(value) -> MatchStatus:
    """Coerce a string to MatchStatus. Raises ValueError on unknown values."""
    if isinstance(value, MatchStatus):
        return value
    return MatchStatus(str(value).strip().lower())


def can_transition(current, requested) -> bool:
    return parse_status(requested) in ALLOWED_TRANSITIONS[parse_status(current)]


def is_advanced(status) -> bool:
    """True once an employer has moved the match past the initial state."""
    return parse_status(status) != MatchStatus.MATCHED
