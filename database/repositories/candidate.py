import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from core.matching.exceptions import CandidateNotFoundError, SkillDataUnavailableError
from core.matching.interfaces import CandidateDirectory, ProfileFactorProvider
from core.scorer.models import EducationEntry, ProfileFactors, WorkHistoryEntry
from database.models import CandidateProfile, User
from database.repositories.base import BaseRepository, as_uuid

logger = logging.getLogger(__name__)


class CandidateRepository(BaseRepository, ProfileFactorProvider, CandidateDirectory):
    def get_eligible_candidates(self) -> List[str]:
        """Active candidate users whose profile is not private."""
        stmt = (
            select(User.id)
            .join(CandidateProfile, CandidateProfile.user_id == User.id)
            .where(
                User.role == 'candidate',
                User.active.is_(True),
                CandidateProfile.profile_visibility != 'private'
            )
            .order_by(User.id)
        )
        return [str(user_id) for user_id in self.db.execute(stmt).scalars().all()]

    def get_candidate_profile_factors(self, candidate_id: str) -> ProfileFactors:
        user_id = as_uuid(candidate_id)
        if user_id is None:
            raise CandidateNotFoundError(candidate_id)

        stmt = (
            select(CandidateProfile)
            .where(CandidateProfile.user_id == user_id)
            .options(
                selectinload(CandidateProfile.education),
                selectinload(CandidateProfile.work_experience)
            )
        )

        try:
            profile = self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            self.rollback()
            logger.error(f"Profile lookup failed for candidate {candidate_id}: {e}")
            raise SkillDataUnavailableError(candidate_id, str(e)) from e

        if profile is None:
            raise CandidateNotFoundError(candidate_id)

        return ProfileFactors(
            years_experience=profile.years_experience,
            remote_preference=profile.remote_preference,
            willing_to_relocate=bool(profile.willing_to_relocate),
            city=profile.city,
            state=profile.state,
            education=[
                EducationEntry(degree=e.degree, field_of_study=e.field_of_study)
                for e in profile.education
            ],
            work_history=[
                WorkHistoryEntry(title=w.title, company=w.company, description=w.description)
                for w in profile.work_experience
            ],
        )
