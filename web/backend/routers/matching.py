#!/usr/bin/env python3
"""
Matching endpoints - recalculate, rank, browse and manage match status.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from core.matching.service import MatchingService
from core.matching.tasks import MatchingTaskQueue
from core.ranking import BrowseFilters, SortKey
from ..dependencies import get_matching_service, get_task_queue
from ..models.requests import ContactRequest, StatusUpdateRequest
from ..models.responses import (
    BrowseJobsResponse,
    CalculateMatchesResponse,
    CandidateMatchesResponse,
    JobCandidatesResponse,
    MatchResponse,
    MatchScoreDetail,
    MatchSummary,
    RankedEntry,
    ScoreResponse,
)
from ..utils import split_csv

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/matching", tags=["matching"])


@router.post("/jobs/{job_id}/calculate", response_model=CalculateMatchesResponse)
def calculate_job_matches(
    job_id: str,
    service: MatchingService = Depends(get_matching_service),
    task_queue: MatchingTaskQueue = Depends(get_task_queue)
):
    """
    Recalculate the strict-mode ranking for a job.

    With the matching queue enabled the batch is pushed to an RQ worker and
    only the task id is returned. Otherwise it runs inline and the response
    carries counts and a preview of the top results.
    """
    if task_queue.async_mode:
        outcome = task_queue.enqueue_job_match_calculation(job_id)
        return CalculateMatchesResponse(
            success=True,
            job_id=job_id,
            queued=True,
            task_id=outcome.task_id
        )

    result = service.calculate_job_matches(job_id)
    return CalculateMatchesResponse(
        success=True,
        job_id=job_id,
        queued=False,
        match_count=result.match_count,
        skipped_count=result.skipped_count,
        evaluated_count=result.evaluated_count,
        duration_seconds=round(result.duration_seconds, 3),
        preview=[RankedEntry.from_ranked(r) for r in result.preview]
    )


@router.get("/jobs/{job_id}/candidates", response_model=JobCandidatesResponse)
def get_job_candidates(
    job_id: str,
    include_unranked: bool = Query(
        default=False,
        description="Include advanced matches that no longer qualify (rank is null)"
    ),
    service: MatchingService = Depends(get_matching_service)
):
    """Persisted ranking for a job, best rank first."""
    records = service.get_job_candidates(job_id, include_unranked=include_unranked)
    return JobCandidatesResponse(
        success=True,
        job_id=job_id,
        count=len(records),
        candidates=[MatchSummary.from_record(r) for r in records]
    )


@router.get("/candidates/{candidate_id}/matches", response_model=CandidateMatchesResponse)
def get_candidate_matches(
    candidate_id: str,
    service: MatchingService = Depends(get_matching_service)
):
    """Persisted matches for a candidate, highest overall score first."""
    records = service.get_candidate_matches(candidate_id)
    return CandidateMatchesResponse(
        success=True,
        candidate_id=candidate_id,
        count=len(records),
        matches=[MatchSummary.from_record(r) for r in records]
    )


@router.get("/candidates/{candidate_id}/browse-jobs", response_model=BrowseJobsResponse)
def browse_jobs(
    candidate_id: str,
    location_types: Optional[str] = Query(
        default=None,
        description="Comma-separated remote options to keep: remote, hybrid, onsite, flexible"
    ),
    qualified_only: bool = Query(default=False, description="Only jobs whose required skills are all met"),
    sort_by: SortKey = Query(default=SortKey.OVERALL_SCORE, description="overall_score or posted_at"),
    min_score: Optional[float] = Query(default=None, ge=0, le=100, description="Minimum overall score"),
    service: MatchingService = Depends(get_matching_service)
):
    """
    Score every active job for the candidate without persisting anything.

    Unqualified jobs are included unless qualified_only is set.
    """
    filters = BrowseFilters(
        location_types=split_csv(location_types),
        qualified_only=qualified_only,
        sort_by=sort_by,
        min_score=min_score
    )
    results = service.browse_jobs_for_candidate(candidate_id, filters)
    return BrowseJobsResponse(
        success=True,
        candidate_id=candidate_id,
        count=len(results),
        jobs=[RankedEntry.from_ranked(r) for r in results]
    )


@router.get("/candidates/{candidate_id}/jobs/{job_id}/score", response_model=ScoreResponse)
def get_match_score(
    candidate_id: str,
    job_id: str,
    service: MatchingService = Depends(get_matching_service)
):
    """Score one candidate against one job with the full breakdown."""
    score = service.compute_match(candidate_id, job_id)
    return ScoreResponse(success=True, score=MatchScoreDetail.from_score(score))


@router.get("/matches/{match_id}", response_model=MatchResponse)
def get_match(
    match_id: str,
    record_view: bool = Query(default=False, description="Mark the match viewed if it is still 'matched'"),
    actor_id: Optional[str] = Query(default=None, description="User viewing the match"),
    service: MatchingService = Depends(get_matching_service)
):
    """Get a stored match; the employer detail view sets record_view."""
    if record_view:
        record = service.record_match_view(match_id, actor=actor_id)
    else:
        record = service.get_match(match_id)
    return MatchResponse(success=True, match=MatchSummary.from_record(record))


@router.put("/matches/{match_id}/status", response_model=MatchResponse)
def update_match_status(
    match_id: str,
    request: StatusUpdateRequest,
    service: MatchingService = Depends(get_matching_service)
):
    """
    Move a match along the status lifecycle.

    Returns 409 when the edge is not allowed or a concurrent update got there first.
    """
    record = service.update_match_status(match_id, request.status, actor=request.actor_id)
    return MatchResponse(success=True, match=MatchSummary.from_record(record))


@router.post("/matches/{match_id}/contact", response_model=MatchResponse)
def contact_candidate(
    match_id: str,
    request: Optional[ContactRequest] = None,
    service: MatchingService = Depends(get_matching_service)
):
    actor_id = request.actor_id if request is not None else None
    record = service.contact_candidate(match_id, actor=actor_id)
    return MatchResponse(success=True, match=MatchSummary.from_record(record))
