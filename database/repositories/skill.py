import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from core.matching.exceptions import SkillDataUnavailableError
from core.matching.interfaces import SkillProfileProvider
from core.scorer.models import CandidateSkillEntry
from database.models import Skill, UserSkillScore
from database.repositories.base import BaseRepository, as_uuid, to_float

logger = logging.getLogger(__name__)


class SkillScoreRepository(BaseRepository, SkillProfileProvider):
    def get_candidate_skill_scores(
        self,
        candidate_id: str,
        as_of: Optional[datetime] = None
    ) -> List[CandidateSkillEntry]:
        user_id = as_uuid(candidate_id)
        if user_id is None:
            return []

        as_of = as_of or datetime.now(timezone.utc)
        stmt = (
            select(UserSkillScore, Skill.name)
            .join(Skill, Skill.id == UserSkillScore.skill_id)
            .where(
                UserSkillScore.user_id == user_id,
                UserSkillScore.expires_at > as_of
            )
            .order_by(Skill.name)
        )

        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            self.rollback()
            logger.error(f"Skill score lookup failed for candidate {candidate_id}: {e}")
            raise SkillDataUnavailableError(candidate_id, str(e)) from e

        return [
            CandidateSkillEntry(
                skill_id=str(score.skill_id),
                score=to_float(score.score),
                source=score.source,
                expires_at=score.expires_at,
                skill_name=name,
            )
            for score, name in rows
        ]
