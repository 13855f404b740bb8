import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select, update, delete, func

from core.matching.dto import MatchRecord
from core.matching.exceptions import MatchNotFoundError
from core.matching.interfaces import MatchStore
from core.matching.status import MatchStatus, is_advanced
from core.ranking import RankedMatch
from database.models import JobMatch
from database.repositories.base import BaseRepository, as_uuid, to_float

logger = logging.getLogger(__name__)


def to_match_record(match: JobMatch) -> MatchRecord:
    return MatchRecord(
        match_id=str(match.id),
        job_id=str(match.job_id),
        candidate_id=str(match.user_id),
        overall_score=to_float(match.overall_score),
        rank=match.match_rank,
        status=match.status,
        skill_breakdown=list(match.skill_breakdown or []),
        reviewed_at=match.reviewed_at,
        contacted_at=match.contacted_at,
        created_at=match.created_at,
        updated_at=match.updated_at,
        status_updated_by=match.status_updated_by,
    )


class MatchRepository(BaseRepository, MatchStore):
    def _get_row(self, match_id) -> JobMatch:
        match_uuid = as_uuid(match_id)
        match = self.db.get(JobMatch, match_uuid) if match_uuid is not None else None
        if match is None:
            raise MatchNotFoundError(match_id)
        return match

    def get_match(self, match_id: str) -> MatchRecord:
        return to_match_record(self._get_row(match_id))

    def replace_job_matches(
        self,
        job_id: str,
        ranked: Sequence[RankedMatch],
        policy: str = "preserve_advanced"
    ) -> int:
        """
        Replace the stored ranking for a job in a single transaction.

        reset: delete every match for the job, insert the new ranking.
        preserve_advanced: upsert by candidate; matches still at 'matched' that
        no longer qualify are deleted, advanced ones are kept with rank NULL.
        """
        job_uuid = as_uuid(job_id)
        incoming: Dict[str, RankedMatch] = {str(r.candidate_id): r for r in ranked}

        try:
            if policy == "reset":
                self.db.execute(delete(JobMatch).where(JobMatch.job_id == job_uuid))
                kept = 0
                dropped = 0
            else:
                existing = self.db.execute(
                    select(JobMatch).where(JobMatch.job_id == job_uuid)
                ).scalars().all()

                kept = 0
                dropped = 0
                for match in existing:
                    fresh = incoming.pop(str(match.user_id), None)
                    if fresh is not None:
                        match.overall_score = fresh.overall_score
                        match.match_rank = fresh.rank
                        match.skill_breakdown = fresh.score.breakdown_as_dicts()
                    elif is_advanced(match.status):
                        match.match_rank = None
                        kept += 1
                    else:
                        self.db.delete(match)
                        dropped += 1

            for fresh in incoming.values():
                self.db.add(JobMatch(
                    job_id=job_uuid,
                    user_id=as_uuid(fresh.candidate_id),
                    overall_score=fresh.overall_score,
                    match_rank=fresh.rank,
                    skill_breakdown=fresh.score.breakdown_as_dicts(),
                    status=MatchStatus.MATCHED.value,
                ))

            self.db.flush()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            f"Stored {len(ranked)} ranked matches for job {job_id} "
            f"(policy={policy}, kept_unranked={kept}, dropped={dropped})"
        )
        return len(ranked)

    def get_job_candidates(self, job_id: str, include_unranked: bool = False) -> List[MatchRecord]:
        stmt = select(JobMatch).where(JobMatch.job_id == as_uuid(job_id))
        if not include_unranked:
            stmt = stmt.where(JobMatch.match_rank.is_not(None))
        stmt = stmt.order_by(
            JobMatch.match_rank.is_(None),
            JobMatch.match_rank,
            JobMatch.overall_score.desc(),
            JobMatch.user_id
        )
        return [to_match_record(m) for m in self.db.execute(stmt).scalars().all()]

    def get_candidate_matches(self, candidate_id: str) -> List[MatchRecord]:
        stmt = (
            select(JobMatch)
            .where(JobMatch.user_id == as_uuid(candidate_id))
            .order_by(JobMatch.overall_score.desc(), JobMatch.job_id)
        )
        return [to_match_record(m) for m in self.db.execute(stmt).scalars().all()]

    def transition_status(
        self,
        match_id: str,
        expected_status: str,
        new_status: str,
        actor: Optional[str],
        at: datetime
    ) -> Optional[MatchRecord]:
        match_uuid = as_uuid(match_id)
        if match_uuid is None:
            raise MatchNotFoundError(match_id)

        values = {
            'status': new_status,
            'status_updated_by': actor,
            'updated_at': at,
        }
        # First entry only; never overwritten
        if new_status == MatchStatus.VIEWED.value:
            values['reviewed_at'] = func.coalesce(JobMatch.reviewed_at, at)
        if new_status == MatchStatus.CONTACTED.value:
            values['contacted_at'] = func.coalesce(JobMatch.contacted_at, at)

        stmt = (
            update(JobMatch)
            .where(JobMatch.id == match_uuid, JobMatch.status == expected_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )

        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                return None
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.expire_all()
        return self.get_match(match_id)
