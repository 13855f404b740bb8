#!/usr/bin/env python3
"""
Scoring Models - Data structures consumed and produced by the Scoring Engine.

Inputs are plain snapshots taken by the orchestrator before scoring starts;
nothing here touches the database.
"""

from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field, asdict
from datetime import datetime


@dataclass(frozen=True)
class CandidateSkillEntry:
    """One verified or manually entered skill score for a candidate."""
    skill_id: str
    score: float
    source: str = "interview"  # interview | manual
    expires_at: Optional[datetime] = None
    skill_name: Optional[str] = None

    def is_current(self, as_of: datetime) -> bool:
        if self.expires_at is None:
            return True
        expires_at = self.expires_at
        # Naive timestamps come back from some drivers; compare like with like
        if expires_at.tzinfo is None and as_of.tzinfo is not None:
            as_of = as_of.replace(tzinfo=None)
        elif expires_at.tzinfo is not None and as_of.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=None)
        return expires_at > as_of


@dataclass(frozen=True)
class JobSkillRequirement:
    """A job's requirement on one skill. Optional skills have required=False."""
    skill_id: str
    weight: float
    minimum_score: float
    required: bool = True
    skill_name: Optional[str] = None


@dataclass(frozen=True)
class EducationEntry:
    degree: Optional[str] = None
    field_of_study: Optional[str] = None


@dataclass(frozen=True)
class WorkHistoryEntry:
    title: Optional[str] = None
    company: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class ProfileFactors:
    """Profile data used for the affinity bonuses."""
    years_experience: Optional[int] = None
    remote_preference: Optional[str] = None  # remote | hybrid | onsite | flexible
    willing_to_relocate: bool = False
    city: Optional[str] = None
    state: Optional[str] = None
    education: List[EducationEntry] = field(default_factory=list)
    work_history: List[WorkHistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class CandidateSkillProfile:
    candidate_id: str
    entries: List[CandidateSkillEntry] = field(default_factory=list)


@dataclass(frozen=True)
class JobRequirements:
    """Snapshot of a job posting and its skill requirements."""
    job_id: str
    title: str = ""
    description: str = ""
    experience_level: Optional[str] = None  # entry | mid | senior | lead | executive
    remote_option: Optional[str] = None  # remote | hybrid | onsite | flexible
    city: Optional[str] = None
    state: Optional[str] = None
    status: str = "active"
    posted_at: Optional[datetime] = None
    company_name: Optional[str] = None
    skills: List[JobSkillRequirement] = field(default_factory=list)

    @property
    def is_remote(self) -> bool:
        return self.remote_option in ('remote', 'flexible')


@dataclass
class SkillBreakdownItem:
    skill_id: str
    required: bool
    present: bool
    candidate_score: Optional[float]
    minimum_score: float
    weight: float
    meets_threshold: bool
    skill_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class MatchScore:
    """Complete scoring result for one candidate/job pair. Never persisted as is."""
    candidate_id: str
    job_id: str

    base_skill_score: float = 0.0
    skill_score: float = 0.0
    skill_cap: Optional[float] = None
    bonus_points: float = 0.0
    bonus_components: Dict[str, float] = field(default_factory=dict)
    overall_score: float = 0.0

    required_skills_met: int = 0
    total_required_skills: int = 0
    qualified: bool = False

    skill_breakdown: List[SkillBreakdownItem] = field(default_factory=list)

    @property
    def required_breakdown(self) -> List[SkillBreakdownItem]:
        return [item for item in self.skill_breakdown if item.required]

    @property
    def optional_breakdown(self) -> List[SkillBreakdownItem]:
        return [item for item in self.skill_breakdown if not item.required]

    @property
    def missing_skills(self) -> List[SkillBreakdownItem]:
        return [item for item in self.skill_breakdown if not item.present]

    def breakdown_as_dicts(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.skill_breakdown]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'candidate_id': self.candidate_id,
            'job_id': self.job_id,
            'base_skill_score': self.base_skill_score,
            'skill_score': self.skill_score,
            'skill_cap': self.skill_cap,
            'bonus_points': self.bonus_points,
            'bonus_components': dict(self.bonus_components),
            'overall_score': self.overall_score,
            'required_skills_met': self.required_skills_met,
            'total_required_skills': self.total_required_skills,
            'qualified': self.qualified,
            'required_skills': [item.to_dict() for item in self.required_breakdown],
            'optional_skills': [item.to_dict() for item in self.optional_breakdown],
        }
