#!/usr/bin/env python3
"""
Response models for API endpoints.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any

from core.matching.dto import MatchRecord
from core.ranking import RankedMatch
from core.scorer.models import MatchScore
from ..utils import safe_datetime_iso, safe_float


class SkillBreakdownEntry(BaseModel):
    """Per-skill line of a match breakdown."""
    skill_id: str
    skill_name: Optional[str] = None
    required: bool
    present: bool
    candidate_score: Optional[float] = None
    minimum_score: float
    weight: float
    meets_threshold: bool


class MatchScoreDetail(BaseModel):
    """Full scoring result for one candidate/job pair."""
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "candidate_id": "550e8400-e29b-41d4-a716-446655440000",
                "job_id": "6ba7b810-9dad-11d1-80b4-00c04fd430c8",
                "base_skill_score": 82.5,
                "skill_score": 82.5,
                "skill_cap": None,
                "bonus_points": 7.0,
                "bonus_components": {"experience": 5.0, "location": 0.0, "education": 0.0, "work_history": 2.0},
                "overall_score": 89.5,
                "required_skills_met": 2,
                "total_required_skills": 2,
                "qualified": True
            }
        }
    )

    candidate_id: str
    job_id: str
    base_skill_score: float = Field(ge=0, le=100)
    skill_score: float = Field(ge=0, le=100)
    skill_cap: Optional[float] = None
    bonus_points: float = Field(ge=0)
    bonus_components: Dict[str, float] = Field(default_factory=dict)
    overall_score: float = Field(ge=0, le=100)
    required_skills_met: int
    total_required_skills: int
    qualified: bool
    required_skills: List[SkillBreakdownEntry] = Field(default_factory=list)
    optional_skills: List[SkillBreakdownEntry] = Field(default_factory=list)

    @classmethod
    def from_score(cls, score: MatchScore) -> "MatchScoreDetail":
        return cls(**score.to_dict())


class MatchSummary(BaseModel):
    """A persisted match as stored by the match store."""
    match_id: str
    job_id: str
    candidate_id: str
    overall_score: float = Field(ge=0, le=100)
    rank: Optional[int] = None
    status: str
    skill_breakdown: List[Dict[str, Any]] = Field(default_factory=list)
    status_updated_by: Optional[str] = None
    reviewed_at: Optional[str] = None
    contacted_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_record(cls, record: MatchRecord) -> "MatchSummary":
        return cls(
            match_id=record.match_id,
            job_id=record.job_id,
            candidate_id=record.candidate_id,
            overall_score=safe_float(record.overall_score),
            rank=record.rank,
            status=record.status,
            skill_breakdown=record.skill_breakdown,
            status_updated_by=record.status_updated_by,
            reviewed_at=safe_datetime_iso(record.reviewed_at),
            contacted_at=safe_datetime_iso(record.contacted_at),
            created_at=safe_datetime_iso(record.created_at),
            updated_at=safe_datetime_iso(record.updated_at),
        )


class MatchResponse(BaseModel):
    success: bool
    match: MatchSummary


class JobCandidatesResponse(BaseModel):
    """Strict-mode ranking for one job."""
    success: bool
    job_id: str
    count: int
    candidates: List[MatchSummary]


class CandidateMatchesResponse(BaseModel):
    success: bool
    candidate_id: str
    count: int
    matches: List[MatchSummary]


class ScoreResponse(BaseModel):
    success: bool
    score: MatchScoreDetail


class RankedEntry(BaseModel):
    """One ranked result: strict preview entry or exploratory browse entry."""
    rank: Optional[int] = None
    candidate_id: str
    job_id: str
    overall_score: float = Field(ge=0, le=100)
    qualified: bool
    title: Optional[str] = None
    company: Optional[str] = None
    remote_option: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    posted_at: Optional[str] = None
    score: MatchScoreDetail

    @classmethod
    def from_ranked(cls, ranked: RankedMatch) -> "RankedEntry":
        job = ranked.job
        return cls(
            rank=ranked.rank,
            candidate_id=ranked.candidate_id,
            job_id=ranked.job_id,
            overall_score=ranked.overall_score,
            qualified=ranked.score.qualified,
            title=job.title if job else None,
            company=job.company_name if job else None,
            remote_option=job.remote_option if job else None,
            city=job.city if job else None,
            state=job.state if job else None,
            posted_at=safe_datetime_iso(job.posted_at) if job else None,
            score=MatchScoreDetail.from_score(ranked.score),
        )


class BrowseJobsResponse(BaseModel):
    """Exploratory ranking of active jobs for one candidate."""
    success: bool
    candidate_id: str
    count: int
    jobs: List[RankedEntry]


class CalculateMatchesResponse(BaseModel):
    """Outcome of an employer-triggered recalculation."""
    success: bool
    job_id: str
    queued: bool = False
    task_id: Optional[str] = None
    match_count: Optional[int] = None
    skipped_count: Optional[int] = None
    evaluated_count: Optional[int] = None
    duration_seconds: Optional[float] = None
    preview: List[RankedEntry] = Field(default_factory=list)
