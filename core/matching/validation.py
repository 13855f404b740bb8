#!/usr/bin/env python3
"""
Boundary validation for provider data.

Scores and thresholds must be in [0, 100] and weights in [0, 1]. Values
outside those ranges are rejected here so the Scoring Engine never sees them.
"""

import math
from typing import Iterable, List

from core.matching.exceptions import ValidationError
from core.scorer.models import CandidateSkillEntry, JobSkillRequirement

SCORE_RANGE = (0.0, 100.0)
WEIGHT_RANGE = (0.0, 1.0)
SKILL_SOURCES = ('interview', 'manual')


def _check_range(field: str, value, bounds) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(field, value, f"{field} must be numeric, got {value!r}")
    low, high = bounds
    if math.isnan(number) or number < low or number > high:
        raise ValidationError(field, value, f"{field} must be between {low:g} and {high:g}, got {value!r}")
    return number


def validate_skill_entry(entry: CandidateSkillEntry) -> CandidateSkillEntry:
    _check_range(f"score[{entry.skill_id}]", entry.score, SCORE_RANGE)
    if entry.source not in SKILL_SOURCES:
        raise ValidationError(f"source[{entry.skill_id}]", entry.source)
    return entry


def validate_requirement(req: JobSkillRequirement) -> JobSkillRequirement:
    _check_range(f"weight[{req.skill_id}]", req.weight, WEIGHT_RANGE)
    _check_range(f"minimum_score[{req.skill_id}]", req.minimum_score, SCORE_RANGE)
    return req


def validate_skill_entries(entries: Iterable[CandidateSkillEntry]) -> List[CandidateSkillEntry]:
    return [validate_skill_entry(e) for e in entries]


def validate_requirements(requirements: Iterable[JobSkillRequirement]) -> List[JobSkillRequirement]:
    return [validate_requirement(r) for r in requirements]
