"""
Provider Interfaces - what the matching engine needs from the rest of the system.

Profile, skill and job data are owned by other services; the engine only
reads them through these interfaces. Implementations are constructed once at
startup and passed in explicitly.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from core.ranking import BrowseFilters, RankedMatch
from core.scorer.models import (
    CandidateSkillEntry,
    JobRequirements,
    JobSkillRequirement,
    ProfileFactors,
)
from core.matching.dto import MatchRecord


class SkillProfileProvider(ABC):

    @abstractmethod
    def get_candidate_skill_scores(self, candidate_id: str) -> List[CandidateSkillEntry]:
        """
        Return the candidate's current (non-expired) skill scores.

        Raises SkillDataUnavailableError when the lookup fails.
        """
        pass


class ProfileFactorProvider(ABC):

    @abstractmethod
    def get_candidate_profile_factors(self, candidate_id: str) -> ProfileFactors:
        """
        Return experience, location, education and work history for a candidate.

        Raises CandidateNotFoundError when the candidate has no profile.
        """
        pass


class CandidateDirectory(ABC):

    @abstractmethod
    def get_eligible_candidates(self) -> List[str]:
        """Return ids of candidates that may be matched (role and visibility respected)."""
        pass


class JobRequirementProvider(ABC):

    @abstractmethod
    def get_job(self, job_id: str) -> JobRequirements:
        """
        Return the job snapshot including its skill requirements.

        Raises JobNotFoundError when the job does not exist.
        """
        pass

    @abstractmethod
    def get_job_requirements(self, job_id: str) -> List[JobSkillRequirement]:
        pass

    @abstractmethod
    def get_active_jobs(self, filters: Optional[BrowseFilters] = None) -> List[JobRequirements]:
        """Return every active job with its skill requirements."""
        pass


class MatchStore(ABC):
    """Persisted matches plus the single-row status updates."""

    @abstractmethod
    def replace_job_matches(
        self,
        job_id: str,
        ranked: Sequence[RankedMatch],
        policy: str = "preserve_advanced"
    ) -> int:
        """
        Swap the stored ranking for job_id with `ranked` in one transaction.

        Returns the number of ranked matches stored.
        """
        pass

    @abstractmethod
    def get_job_candidates(self, job_id: str, include_unranked: bool = False) -> List[MatchRecord]:
        pass

    @abstractmethod
    def get_candidate_matches(self, candidate_id: str) -> List[MatchRecord]:
        pass

    @abstractmethod
    def get_match(self, match_id: str) -> MatchRecord:
        """Raises MatchNotFoundError when missing."""
        pass

    @abstractmethod
    def transition_status(
        self,
        match_id: str,
        expected_status: str,
        new_status: str,
        actor: Optional[str],
        at: datetime
    ) -> Optional[MatchRecord]:
        """
        Compare-and-swap the status of one match.

        Returns the updated record, or None if the stored status was no longer
        `expected_status`.
        """
        pass
