#!/usr/bin/env python3
"""
Bonus Calculations - Profile affinity points added on top of the skill score.

Includes bonuses from:
- Experience level fit (years vs. the job's level band)
- Location / remote fit
- Education relevance
- Work history relevance

Each bonus is capped on its own; the total is capped at config.bonus_cap.
"""

from typing import Dict, Optional, Tuple
import logging

from core.config_loader import ScorerConfig
from core.scorer.models import JobRequirements, ProfileFactors

logger = logging.getLogger(__name__)

# (min_years, max_years) inclusive; None means open-ended
EXPERIENCE_BANDS: Dict[str, Tuple[int, Optional[int]]] = {
    'entry': (0, 3),
    'mid': (2, 6),
    'senior': (5, 10),
    'lead': (8, None),
    'executive': (10, None),
}

ADJACENT_EXPERIENCE_BANDS: Dict[str, Tuple[int, Optional[int]]] = {
    'entry': (0, 5),
    'mid': (1, 8),
    'senior': (3, None),
}

RELEVANT_DEGREES = ('bachelors', 'masters', 'phd')

MIN_KEYWORD_LENGTH = 4


def _in_band(years: int, band: Optional[Tuple[int, Optional[int]]]) -> bool:
    if band is None:
        return False
    low, high = band
    return years >= low and (high is None or years <= high)


def _normalize(value: Optional[str]) -> str:
    return (value or '').strip().lower()


def calculate_experience_bonus(
    job: JobRequirements,
    profile: ProfileFactors,
    config: ScorerConfig
) -> float:
    """Full bonus inside the job's level band, partial bonus in the adjacent band."""
    if profile.years_experience is None or not job.experience_level:
        return 0.0

    level = _normalize(job.experience_level)
    years = int(profile.years_experience)

    if _in_band(years, EXPERIENCE_BANDS.get(level)):
        return config.experience_bonus_max
    if _in_band(years, ADJACENT_EXPERIENCE_BANDS.get(level)):
        return config.experience_bonus_adjacent
    return 0.0


def calculate_location_bonus(
    job: JobRequirements,
    profile: ProfileFactors,
    config: ScorerConfig
) -> float:
    """
    Remote jobs reward a remote-leaning preference; on-site and hybrid jobs
    reward geographic proximity or willingness to relocate.
    """
    max_bonus = config.location_bonus_max
    preference = _normalize(profile.remote_preference)

    if job.is_remote:
        if preference in ('remote', 'flexible'):
            return max_bonus
        if preference == 'hybrid':
            return max_bonus * 0.6
        return 0.0

    if not (job.city and job.state and profile.city and profile.state):
        return 0.0

    same_state = _normalize(job.state) == _normalize(profile.state)
    same_city = same_state and _normalize(job.city) == _normalize(profile.city)

    if same_city:
        return max_bonus
    if same_state:
        return max_bonus * 0.6 if profile.willing_to_relocate else max_bonus * 0.2
    if profile.willing_to_relocate:
        return max_bonus * 0.4
    return 0.0


def calculate_education_bonus(
    job: JobRequirements,
    profile: ProfileFactors,
    config: ScorerConfig
) -> float:
    """Field of study mentioned in the posting beats simply holding a degree."""
    if not profile.education:
        return 0.0

    title = _normalize(job.title)
    description = _normalize(job.description)

    for edu in profile.education:
        field_of_study = _normalize(edu.field_of_study)
        if len(field_of_study) >= MIN_KEYWORD_LENGTH and (
            field_of_study in title or field_of_study in description
        ):
            return config.education_bonus_relevant

    if any(_normalize(edu.degree) in RELEVANT_DEGREES for edu in profile.education):
        return config.education_bonus_degree
    return 0.0


def calculate_work_history_bonus(
    job: JobRequirements,
    profile: ProfileFactors,
    config: ScorerConfig
) -> float:
    """Bonus when a prior job title shares a meaningful word with the posted title."""
    if not profile.work_history:
        return 0.0

    keywords = [w for w in _normalize(job.title).split() if len(w) >= MIN_KEYWORD_LENGTH]
    if not keywords:
        return 0.0

    for entry in profile.work_history:
        prior_title = _normalize(entry.title)
        if any(keyword in prior_title for keyword in keywords):
            return config.work_history_bonus
    return 0.0


def calculate_bonus_points(
    job: JobRequirements,
    profile: ProfileFactors,
    config: ScorerConfig
) -> Tuple[float, Dict[str, float]]:
    """
    Calculate total bonus points with a per-factor breakdown.

    Returns: (bonus_points, bonus_components)
    """
    components = {
        'experience': min(calculate_experience_bonus(job, profile, config), config.experience_bonus_max),
        'location': min(calculate_location_bonus(job, profile, config), config.location_bonus_max),
        'education': min(calculate_education_bonus(job, profile, config), config.education_bonus_relevant),
        'work_history': min(calculate_work_history_bonus(job, profile, config), config.work_history_bonus),
    }
    total = min(sum(components.values()), config.bonus_cap)
    return total, components
