#!/usr/bin/env python3
"""
Coverage Calculations - Skill lookup, weighted skill score and required coverage.

A skill counts as present only when the candidate holds a non-expired entry
for it. Missing skills are excluded from the weighted average entirely; they
only show up through the required-skill cap.
"""

from typing import Dict, List, Optional, Tuple
from datetime import datetime
import logging

from core.config_loader import ScorerConfig
from core.scorer.models import (
    CandidateSkillEntry,
    JobSkillRequirement,
    SkillBreakdownItem,
)

logger = logging.getLogger(__name__)


def current_skill_scores(
    entries: List[CandidateSkillEntry],
    as_of: datetime
) -> Dict[str, float]:
    """
    Map skill_id -> score for every non-expired entry.

    If a candidate somehow holds more than one current entry for a skill,
    the highest score wins.
    """
    scores: Dict[str, float] = {}
    for entry in entries:
        if not entry.is_current(as_of):
            continue
        previous = scores.get(entry.skill_id)
        if previous is None or entry.score > previous:
            scores[entry.skill_id] = float(entry.score)
    return scores


def build_skill_breakdown(
    requirements: List[JobSkillRequirement],
    candidate_scores: Dict[str, float]
) -> List[SkillBreakdownItem]:
    """Classify every job skill as present or missing for the candidate."""
    breakdown = []
    for req in requirements:
        score = candidate_scores.get(req.skill_id)
        present = score is not None
        breakdown.append(SkillBreakdownItem(
            skill_id=req.skill_id,
            skill_name=req.skill_name,
            required=req.required,
            present=present,
            candidate_score=score,
            minimum_score=float(req.minimum_score),
            weight=float(req.weight),
            meets_threshold=present and score >= req.minimum_score,
        ))
    return breakdown


def calculate_base_skill_score(breakdown: List[SkillBreakdownItem]) -> float:
    """
    Weighted average over present skills only.

    Formula: sum(score_i * weight_i) / sum(weight_i), present skills only.
    Returns 0.0 when nothing is present (or every present weight is zero).
    """
    total_weighted = 0.0
    total_weight = 0.0
    for item in breakdown:
        if not item.present:
            continue
        total_weighted += item.candidate_score * item.weight
        total_weight += item.weight

    if total_weight <= 0:
        return 0.0
    return total_weighted / total_weight


def calculate_required_coverage(breakdown: List[SkillBreakdownItem]) -> Tuple[int, int]:
    """
    Count required skills met (present and at or above threshold).

    Returns: (required_skills_met, total_required_skills)
    """
    required = [item for item in breakdown if item.required]
    met = len([item for item in required if item.meets_threshold])
    return met, len(required)


def calculate_skill_cap(
    required_met: int,
    required_total: int,
    config: ScorerConfig
) -> Optional[float]:
    """
    Upper bound on the skill score when required skills are unmet.

    Formula: ratio * span + base (defaults: ratio * 50 + 25)
    Returns None when every required skill is met (no cap).
    """
    if required_met >= required_total:
        return None
    ratio = required_met / required_total if required_total > 0 else 1.0
    return ratio * config.missing_required_cap_span + config.missing_required_cap_base


def apply_skill_cap(base_skill_score: float, cap: Optional[float]) -> float:
    if cap is None:
        return base_skill_score
    return min(base_skill_score, cap)
