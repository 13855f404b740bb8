#!/usr/bin/env python3
"""
Ranking & Qualification Classifier.

Turns a set of MatchScores into an ordered result set under one of two modes:
- strict: qualified candidates only, overall score descending, ties broken by
  candidate id ascending, dense ranks 1..N (employer-side, persisted)
- exploratory: every job regardless of qualification, caller-selected sort and
  filters, no rank (candidate-side browsing, transient)
"""

from enum import Enum
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
import logging

from core.scorer.models import JobRequirements, MatchScore

logger = logging.getLogger(__name__)


class RankingMode(str, Enum):
    STRICT = "strict"
    EXPLORATORY = "exploratory"


class SortKey(str, Enum):
    OVERALL_SCORE = "overall_score"
    POSTED_AT = "posted_at"


@dataclass
class BrowseFilters:
    """Caller-selectable options for exploratory ranking."""
    location_types: List[str] = field(default_factory=list)  # remote_option values to keep
    qualified_only: bool = False
    sort_by: SortKey = SortKey.OVERALL_SCORE
    min_score: Optional[float] = None


@dataclass
class RankedMatch:
    score: MatchScore
    rank: Optional[int] = None
    job: Optional[JobRequirements] = None

    @property
    def candidate_id(self) -> str:
        return self.score.candidate_id

    @property
    def job_id(self) -> str:
        return self.score.job_id

    @property
    def overall_score(self) -> float:
        return self.score.overall_score


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def _posted_at_key(job: Optional[JobRequirements]) -> datetime:
    if job is None or job.posted_at is None:
        return _EPOCH
    posted_at = job.posted_at
    if posted_at.tzinfo is None:
        posted_at = posted_at.replace(tzinfo=timezone.utc)
    return posted_at


def rank_strict(scores: Sequence[MatchScore]) -> List[RankedMatch]:
    """Keep qualified scores only and assign dense ranks 1..N."""
    qualified = [s for s in scores if s.qualified]
    qualified.sort(key=lambda s: (-s.overall_score, str(s.candidate_id)))
    return [RankedMatch(score=s, rank=index) for index, s in enumerate(qualified, start=1)]


def rank_exploratory(
    scores: Sequence[MatchScore],
    filters: Optional[BrowseFilters] = None,
    jobs: Optional[Dict[str, JobRequirements]] = None
) -> List[RankedMatch]:
    """Filter and sort scores for browsing. No ranks are assigned."""
    filters = filters or BrowseFilters()
    jobs = jobs or {}

    results = [RankedMatch(score=s, job=jobs.get(s.job_id)) for s in scores]

    if filters.qualified_only:
        results = [r for r in results if r.score.qualified]

    if filters.location_types:
        wanted = {t.lower() for t in filters.location_types}
        results = [
            r for r in results
            if r.job is not None and (r.job.remote_option or '').lower() in wanted
        ]

    if filters.min_score is not None:
        results = [r for r in results if r.overall_score >= filters.min_score]

    # Stable sorts: secondary key first, then primary
    results.sort(key=lambda r: str(r.job_id))
    if filters.sort_by == SortKey.POSTED_AT:
        results.sort(key=lambda r: _posted_at_key(r.job), reverse=True)
    else:
        results.sort(key=lambda r: r.overall_score, reverse=True)

    return results


def rank_matches(
    scores: Sequence[MatchScore],
    mode: RankingMode,
    filters: Optional[BrowseFilters] = None,
    jobs: Optional[Dict[str, JobRequirements]] = None
) -> List[RankedMatch]:
    if mode == RankingMode.STRICT:
        ranked = rank_strict(scores)
    else:
        ranked = rank_exploratory(scores, filters, jobs)
    logger.debug(f"Ranked {len(ranked)} of {len(scores)} scores in {mode.value} mode")
    return ranked
