#!/usr/bin/env python3
"""
Matching exceptions.
"""

from typing import Any, Optional


class MatchingError(Exception):
    """Base exception for matching engine errors."""
    pass


class NotFoundError(MatchingError):
    """Raised when a referenced entity does not exist."""
    pass


class JobNotFoundError(NotFoundError):
    def __init__(self, job_id: Any):
        self.job_id = job_id
        super().__init__(f"Job {job_id} not found")


class CandidateNotFoundError(NotFoundError):
    def __init__(self, candidate_id: Any):
        self.candidate_id = candidate_id
        super().__init__(f"Candidate {candidate_id} not found")


class MatchNotFoundError(NotFoundError):
    def __init__(self, match_id: Any):
        self.match_id = match_id
        super().__init__(f"Match {match_id} not found")


class JobNotActiveError(MatchingError):
    def __init__(self, job_id: Any, status: Optional[str]):
        self.job_id = job_id
        self.status = status
        super().__init__(f"Job {job_id} is not active (status: {status})")


class JobHasNoRequirementsError(MatchingError):
    def __init__(self, job_id: Any):
        self.job_id = job_id
        super().__init__(f"Job {job_id} has no skill requirements")


class ValidationError(MatchingError):
    """Raised at the provider boundary when a value is out of range."""

    def __init__(self, field: str, value: Any, message: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(message or f"Invalid value for {field}: {value!r}")


class SkillDataUnavailableError(MatchingError):
    """Raised when skill or profile data for one candidate cannot be read."""

    def __init__(self, candidate_id: Any, reason: str = ""):
        self.candidate_id = candidate_id
        super().__init__(f"Skill data unavailable for candidate {candidate_id}: {reason}")


class InvalidStatusTransitionError(MatchingError):
    def __init__(self, match_id: Any, current_status: str, requested_status: str):
        self.match_id = match_id
        self.current_status = current_status
        self.requested_status = requested_status
        super().__init__(
            f"Cannot move match {match_id} from '{current_status}' to '{requested_status}'"
        )


class BatchTimeoutError(MatchingError):
    def __init__(self, subject: Any, timeout: float):
        self.subject = subject
        self.timeout = timeout
        super().__init__(f"Batch run for {subject} did not finish within {timeout}s")
