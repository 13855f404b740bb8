#!/usr/bin/env python3
"""
Scoring Service - Pure scoring of one candidate against one job.

Takes snapshots of candidate skills, job requirements and profile factors and
produces a MatchScore:
- Skill Score: weighted average over present skills, capped when required
  skills are unmet
- Bonus Points: experience, location, education and work history affinity
- Overall Score: skill score + bonus, clamped to [0, 100]

No I/O happens here. All lookups are done by the caller beforehand, so the
service can be shared freely across worker threads.
"""

from typing import Optional
from datetime import datetime, timezone
import logging

from core.config_loader import ScorerConfig
from core.scorer.models import (
    CandidateSkillProfile,
    JobRequirements,
    MatchScore,
    ProfileFactors,
)
from core.scorer import coverage
from core.scorer import bonuses

logger = logging.getLogger(__name__)

MAX_SCORE = 100.0


def _clamp(value: float, low: float = 0.0, high: float = MAX_SCORE) -> float:
    return max(low, min(high, value))


def compute_match_score(
    candidate_skills: CandidateSkillProfile,
    job: JobRequirements,
    profile: ProfileFactors,
    config: Optional[ScorerConfig] = None,
    as_of: Optional[datetime] = None
) -> MatchScore:
    """Calculate the MatchScore for one candidate/job pair.

    Args:
        candidate_skills: Candidate skill entries (expired entries are ignored)
        job: Job snapshot with its skill requirements
        profile: Candidate profile factors for the bonus points
        config: Scorer settings; defaults are used when omitted
        as_of: Reference time for expiry checks (defaults to now, UTC)

    Returns:
        MatchScore with skill, bonus and overall scores plus the skill breakdown
    """
    config = config or ScorerConfig()
    as_of = as_of or datetime.now(timezone.utc)

    candidate_scores = coverage.current_skill_scores(candidate_skills.entries, as_of)
    breakdown = coverage.build_skill_breakdown(job.skills, candidate_scores)

    base_skill_score = coverage.calculate_base_skill_score(breakdown)
    required_met, required_total = coverage.calculate_required_coverage(breakdown)
    skill_cap = coverage.calculate_skill_cap(required_met, required_total, config)
    skill_score = coverage.apply_skill_cap(base_skill_score, skill_cap)

    bonus_points, bonus_components = bonuses.calculate_bonus_points(job, profile, config)

    overall_score = _clamp(skill_score + bonus_points)
    qualified = required_met == required_total

    logger.debug(
        f"Candidate {candidate_skills.candidate_id} / job {job.job_id}: "
        f"base={base_skill_score:.1f}, skill={skill_score:.1f}, bonus={bonus_points:.1f}, "
        f"overall={overall_score:.1f}, required={required_met}/{required_total}"
    )

    return MatchScore(
        candidate_id=candidate_skills.candidate_id,
        job_id=job.job_id,
        base_skill_score=base_skill_score,
        skill_score=skill_score,
        skill_cap=skill_cap,
        bonus_points=bonus_points,
        bonus_components=bonus_components,
        overall_score=overall_score,
        required_skills_met=required_met,
        total_required_skills=required_total,
        qualified=qualified,
        skill_breakdown=breakdown,
    )


class ScoringService:
    """
    Scoring Engine entry point bound to one ScorerConfig.

    Holds no mutable state beyond its config, so one instance can be used
    from any number of threads.
    """

    def __init__(self, config: Optional[ScorerConfig] = None):
        self.config = config or ScorerConfig()

    def compute(
        self,
        candidate_skills: CandidateSkillProfile,
        job: JobRequirements,
        profile: ProfileFactors,
        as_of: Optional[datetime] = None
    ) -> MatchScore:
        return compute_match_score(candidate_skills, job, profile, self.config, as_of)
