#!/usr/bin/env python3
"""
Scoring Module - pure candidate/job scoring.

Public API:
- ScoringService: Scoring Engine bound to a ScorerConfig
- compute_match_score: the scoring function itself
- MatchScore: scoring result

Modules:
- models.py: Input snapshots and the MatchScore result
- coverage.py: Skill lookup, weighted skill score, required coverage and cap
- bonuses.py: Experience, location, education and work history bonuses
- service.py: compute_match_score and ScoringService
"""

from core.scorer.models import (
    CandidateSkillEntry,
    CandidateSkillProfile,
    EducationEntry,
    JobRequirements,
    JobSkillRequirement,
    MatchScore,
    ProfileFactors,
    SkillBreakdownItem,
    WorkHistoryEntry,
)
from core.scorer.service import ScoringService, compute_match_score

__all__ = [
    'ScoringService',
    'compute_match_score',
    'CandidateSkillEntry',
    'CandidateSkillProfile',
    'EducationEntry',
    'JobRequirements',
    'JobSkillRequirement',
    'MatchScore',
    'ProfileFactors',
    'SkillBreakdownItem',
    'WorkHistoryEntry',
]
