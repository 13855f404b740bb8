"""Data Transfer Objects for the matching service.

DTOs carry persisted match data out of the Unit of Work, so callers can use
them after the database session is closed.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from core.ranking import RankedMatch


@dataclass
class MatchRecord:
    """A persisted candidate/job match."""
    match_id: str
    job_id: str
    candidate_id: str
    overall_score: float
    rank: Optional[int]
    status: str
    skill_breakdown: List[Dict[str, Any]] = field(default_factory=list)
    reviewed_at: Optional[datetime] = None
    contacted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    status_updated_by: Optional[str] = None


@dataclass
class BatchResult:
    """Outcome of one CalculateJobMatches run."""
    job_id: str
    match_count: int
    skipped_count: int
    skipped_candidate_ids: List[str] = field(default_factory=list)
    preview: List[RankedMatch] = field(default_factory=list)
    evaluated_count: int = 0
    duration_seconds: float = 0.0
