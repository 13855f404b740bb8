import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from core.matching.exceptions import JobNotFoundError
from core.matching.interfaces import JobRequirementProvider
from core.ranking import BrowseFilters
from core.scorer.models import JobRequirements, JobSkillRequirement
from database.models import Job, JobSkill
from database.repositories.base import BaseRepository, as_uuid, to_float

logger = logging.getLogger(__name__)


def _to_requirement(job_skill: JobSkill) -> JobSkillRequirement:
    return JobSkillRequirement(
        skill_id=str(job_skill.skill_id),
        weight=to_float(job_skill.weight),
        minimum_score=to_float(job_skill.minimum_score),
        required=bool(job_skill.required),
        skill_name=job_skill.skill.name if job_skill.skill is not None else None,
    )


def _to_job_requirements(job: Job) -> JobRequirements:
    skills = sorted(job.skills, key=lambda s: str(s.skill_id))
    return JobRequirements(
        job_id=str(job.id),
        title=job.title or '',
        description=job.description or '',
        experience_level=job.experience_level,
        remote_option=job.remote_option,
        city=job.city,
        state=job.state,
        status=job.status,
        posted_at=job.created_at,
        company_name=job.company.name if job.company is not None else None,
        skills=[_to_requirement(s) for s in skills],
    )


class JobRepository(BaseRepository, JobRequirementProvider):
    def _job_query(self):
        return select(Job).options(
            selectinload(Job.skills).selectinload(JobSkill.skill),
            selectinload(Job.company)
        )

    def _get_job_row(self, job_id) -> Job:
        job_uuid = as_uuid(job_id)
        if job_uuid is None:
            raise JobNotFoundError(job_id)
        job = self.db.execute(self._job_query().where(Job.id == job_uuid)).scalar_one_or_none()
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    def get_job(self, job_id: str) -> JobRequirements:
        return _to_job_requirements(self._get_job_row(job_id))

    def get_job_requirements(self, job_id: str) -> List[JobSkillRequirement]:
        return self.get_job(job_id).skills

    def get_active_jobs(self, filters: Optional[BrowseFilters] = None) -> List[JobRequirements]:
        stmt = self._job_query().where(Job.status == 'active')

        if filters is not None and filters.location_types:
            stmt = stmt.where(Job.remote_option.in_([t.lower() for t in filters.location_types]))

        stmt = stmt.order_by(Job.created_at.desc(), Job.id)
        jobs = self.db.execute(stmt).scalars().all()
        return [_to_job_requirements(job) for job in jobs]
