#!/usr/bin/env python3
"""
Matching Service - Batch orchestration and match lifecycle.

Snapshots inputs through the provider interfaces, runs the pure Scoring
Engine across a bounded worker pool, classifies the results and either
persists them (employer-triggered CalculateJobMatches) or returns them
directly (candidate-side browsing).

Status updates go through the forward-only state machine in
core.matching.status and are applied with compare-and-swap semantics.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from tenacity import (
    Retrying,
    stop_after_attempt,
    wait_fixed,
    retry_if_exception_type,
    before_sleep_log,
)

from core.config_loader import MatchingConfig
from core.ranking import BrowseFilters, RankedMatch, RankingMode, rank_matches
from core.scorer import ScoringService
from core.scorer.models import (
    CandidateSkillProfile,
    JobRequirements,
    MatchScore,
    ProfileFactors,
)
from core.matching import validation
from core.matching.dto import BatchResult, MatchRecord
from core.matching.exceptions import (
    BatchTimeoutError,
    CandidateNotFoundError,
    InvalidStatusTransitionError,
    JobHasNoRequirementsError,
    JobNotActiveError,
    SkillDataUnavailableError,
    ValidationError,
)
from core.matching.interfaces import (
    CandidateDirectory,
    JobRequirementProvider,
    MatchStore,
    ProfileFactorProvider,
    SkillProfileProvider,
)
from core.matching.status import MatchStatus, can_transition, parse_status

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CandidateSnapshot:
    skills: CandidateSkillProfile
    profile: ProfileFactors


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MatchingService:
    """
    Engine-facing operations: ComputeMatch, CalculateJobMatches,
    GetJobCandidates, BrowseJobsForCandidate and UpdateMatchStatus.
    """

    def __init__(
        self,
        skills: SkillProfileProvider,
        profiles: ProfileFactorProvider,
        jobs: JobRequirementProvider,
        candidates: CandidateDirectory,
        matches: MatchStore,
        config: Optional[MatchingConfig] = None,
        clock: Callable[[], datetime] = _utcnow
    ):
        self.skills = skills
        self.profiles = profiles
        self.jobs = jobs
        self.candidates = candidates
        self.matches = matches
        self.config = config or MatchingConfig()
        self.scorer = ScoringService(self.config.scorer)
        self.clock = clock

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def _retrying(self) -> Retrying:
        batch = self.config.batch
        return Retrying(
            stop=stop_after_attempt(batch.lookup_retry_attempts),
            wait=wait_fixed(batch.lookup_retry_wait_seconds),
            retry=retry_if_exception_type(SkillDataUnavailableError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )

    def _load_skills(self, candidate_id: str) -> CandidateSkillProfile:
        """Current skill entries; a failed lookup leaves every skill missing."""
        try:
            entries = self._retrying()(self.skills.get_candidate_skill_scores, candidate_id)
        except SkillDataUnavailableError as e:
            logger.warning(f"Skill data unavailable for candidate {candidate_id}, scoring with no skills: {e}")
            entries = []
        return CandidateSkillProfile(
            candidate_id=candidate_id,
            entries=validation.validate_skill_entries(entries)
        )

    def _load_candidate(self, candidate_id: str) -> CandidateSnapshot:
        profile = self._retrying()(self.profiles.get_candidate_profile_factors, candidate_id)
        return CandidateSnapshot(skills=self._load_skills(candidate_id), profile=profile)

    def _load_job(self, job_id: str) -> JobRequirements:
        job = self.jobs.get_job(job_id)
        validation.validate_requirements(job.skills)
        return job

    # ------------------------------------------------------------------
    # Scoring
    # ------------------------------------------------------------------

    def _score_parallel(
        self,
        pairs: List[Tuple[CandidateSnapshot, JobRequirements]],
        as_of: datetime,
        deadline: float,
        subject: str,
        failure_key: Callable[[CandidateSnapshot, JobRequirements], str]
    ) -> Tuple[List[MatchScore], List[str]]:
        """
        Score candidate/job pairs on a bounded pool.

        Returns (scores, failed_ids); failed_ids holds failure_key(snapshot, job)
        for every pair whose scoring raised.
        """
        if not pairs:
            return [], []

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise BatchTimeoutError(subject, self.config.batch.timeout_seconds)

        scores: List[MatchScore] = []
        failed: List[str] = []
        executor = ThreadPoolExecutor(max_workers=self.config.batch.max_workers)
        try:
            futures = {
                executor.submit(self.scorer.compute, snap.skills, job, snap.profile, as_of): (snap, job)
                for snap, job in pairs
            }
            done, not_done = wait(futures, timeout=remaining)
            if not_done:
                for future in not_done:
                    future.cancel()
                raise BatchTimeoutError(subject, self.config.batch.timeout_seconds)

            for future in done:
                snap, job = futures[future]
                try:
                    scores.append(future.result())
                except Exception as e:
                    failed_id = failure_key(snap, job)
                    logger.warning(f"Scoring failed for {failed_id} in {subject}: {e}", exc_info=True)
                    failed.append(failed_id)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        return scores, failed

    def compute_match(self, candidate_id: str, job_id: str) -> MatchScore:
        """Score a single candidate/job pair.

        Raises:
            JobNotFoundError / CandidateNotFoundError: unknown ids
            ValidationError: out-of-range provider data
        """
        job = self._load_job(job_id)
        snapshot = self._load_candidate(candidate_id)
        return self.scorer.compute(snapshot.skills, job, snapshot.profile, self.clock())

    # ------------------------------------------------------------------
    # CalculateJobMatches (strict, persisted)
    # ------------------------------------------------------------------

    def calculate_job_matches(self, job_id: str) -> BatchResult:
        """Score every eligible candidate for a job and replace its stored ranking.

        Per-candidate failures are logged and counted in skipped_count; they
        never abort the batch.

        Raises:
            JobNotFoundError: job does not exist
            JobNotActiveError: job status is not 'active'
            JobHasNoRequirementsError: job has no skill requirements
            BatchTimeoutError: scoring did not finish within batch.timeout_seconds
        """
        started = time.monotonic()
        deadline = started + self.config.batch.timeout_seconds
        as_of = self.clock()

        job = self._load_job(job_id)
        if job.status != 'active':
            raise JobNotActiveError(job_id, job.status)
        if not job.skills:
            raise JobHasNoRequirementsError(job_id)

        candidate_ids = self.candidates.get_eligible_candidates()
        logger.info(f"Calculating matches for job {job_id} across {len(candidate_ids)} candidates")

        pairs: List[Tuple[CandidateSnapshot, JobRequirements]] = []
        skipped: List[str] = []
        for candidate_id in candidate_ids:
            try:
                pairs.append((self._load_candidate(candidate_id), job))
            except (CandidateNotFoundError, SkillDataUnavailableError, ValidationError) as e:
                logger.warning(f"Skipping candidate {candidate_id} for job {job_id}: {e}")
                skipped.append(candidate_id)

        scores, failed = self._score_parallel(
            pairs, as_of, deadline,
            subject=f"job {job_id}",
            failure_key=lambda snap, _job: snap.skills.candidate_id
        )
        skipped.extend(failed)

        ranked = rank_matches(scores, RankingMode.STRICT)
        stored = self.matches.replace_job_matches(
            job_id, ranked, policy=self.config.store.recalculation_policy
        )

        duration = time.monotonic() - started
        logger.info(
            f"Job {job_id}: {stored} matches stored, {len(skipped)} candidates skipped, "
            f"{len(scores)} scored in {duration:.2f}s"
        )

        return BatchResult(
            job_id=job_id,
            match_count=stored,
            skipped_count=len(skipped),
            skipped_candidate_ids=skipped,
            preview=ranked[:self.config.store.preview_size],
            evaluated_count=len(scores),
            duration_seconds=duration,
        )

    def get_job_candidates(self, job_id: str, include_unranked: bool = False) -> List[MatchRecord]:
        """Persisted strict-mode ranking for a job, best rank first."""
        self.jobs.get_job(job_id)
        return self.matches.get_job_candidates(job_id, include_unranked=include_unranked)

    def get_candidate_matches(self, candidate_id: str) -> List[MatchRecord]:
        return self.matches.get_candidate_matches(candidate_id)

    def get_match(self, match_id: str) -> MatchRecord:
        return self.matches.get_match(match_id)

    # ------------------------------------------------------------------
    # BrowseJobsForCandidate (exploratory, transient)
    # ------------------------------------------------------------------

    def browse_jobs_for_candidate(
        self,
        candidate_id: str,
        filters: Optional[BrowseFilters] = None
    ) -> List[RankedMatch]:
        """Score every active job for one candidate without persisting anything.

        Raises:
            CandidateNotFoundError: candidate has no profile
            BatchTimeoutError: scoring did not finish within batch.timeout_seconds
        """
        filters = filters or BrowseFilters()
        deadline = time.monotonic() + self.config.batch.timeout_seconds
        as_of = self.clock()

        snapshot = self._load_candidate(candidate_id)

        jobs: Dict[str, JobRequirements] = {}
        for job in self.jobs.get_active_jobs(filters):
            try:
                validation.validate_requirements(job.skills)
            except ValidationError as e:
                logger.warning(f"Excluding job {job.job_id} from browse: {e}")
                continue
            jobs[job.job_id] = job

        pairs = [(snapshot, job) for job in jobs.values()]
        scores, _ = self._score_parallel(
            pairs, as_of, deadline,
            subject=f"candidate {candidate_id}",
            failure_key=lambda _snap, job: job.job_id
        )

        results = rank_matches(scores, RankingMode.EXPLORATORY, filters=filters, jobs=jobs)
        logger.info(f"Browse for candidate {candidate_id}: {len(results)} of {len(jobs)} active jobs returned")
        return results

    # ------------------------------------------------------------------
    # Status lifecycle
    # ------------------------------------------------------------------

    def update_match_status(self, match_id: str, new_status, actor: Optional[str] = None) -> MatchRecord:
        """Move a match along the status lifecycle.

        Raises:
            MatchNotFoundError: unknown match
            ValidationError: unknown status value
            InvalidStatusTransitionError: edge not allowed, or another update won the race
        """
        try:
            requested = parse_status(new_status)
        except ValueError:
            raise ValidationError('status', new_status)

        record = self.matches.get_match(match_id)
        current = parse_status(record.status)

        if not can_transition(current, requested):
            raise InvalidStatusTransitionError(match_id, current.value, requested.value)

        updated = self.matches.transition_status(
            match_id, current.value, requested.value, actor, self.clock()
        )
        if updated is None:
            latest = self.matches.get_match(match_id)
            raise InvalidStatusTransitionError(match_id, latest.status, requested.value)

        logger.info(f"Match {match_id}: {current.value} -> {requested.value} (actor={actor})")
        return updated

    def record_match_view(self, match_id: str, actor: Optional[str] = None) -> MatchRecord:
        """Mark a match viewed the first time an employer opens it. Idempotent."""
        record = self.matches.get_match(match_id)
        if parse_status(record.status) != MatchStatus.MATCHED:
            return record

        updated = self.matches.transition_status(
            match_id, MatchStatus.MATCHED.value, MatchStatus.VIEWED.value, actor, self.clock()
        )
        if updated is None:
            # Someone else moved it first
            return self.matches.get_match(match_id)

        logger.info(f"Match {match_id} viewed (actor={actor})")
        return updated

    def contact_candidate(self, match_id: str, actor: Optional[str] = None) -> MatchRecord:
        return self.update_match_status(match_id, MatchStatus.CONTACTED, actor)
