"""Matching Module - batch orchestration, match lifecycle and provider interfaces."""
from core.matching.exceptions import (
    MatchingError, NotFoundError, JobNotFoundError, CandidateNotFoundError,
    MatchNotFoundError, JobNotActiveError, JobHasNoRequirementsError,
    ValidationError, SkillDataUnavailableError, InvalidStatusTransitionError,
    BatchTimeoutError
)
from core.matching.status import MatchStatus, ALLOWED_TRANSITIONS, can_transition
from core.matching.dto import MatchRecord, BatchResult
from core.matching.service import MatchingService

__all__ = [
    'MatchingService', 'MatchRecord', 'BatchResult',
    'MatchStatus', 'ALLOWED_TRANSITIONS', 'can_transition',
    'MatchingError', 'NotFoundError', 'JobNotFoundError', 'CandidateNotFoundError',
    'MatchNotFoundError', 'JobNotActiveError', 'JobHasNoRequirementsError',
    'ValidationError', 'SkillDataUnavailableError', 'InvalidStatusTransitionError',
    'BatchTimeoutError'
]
