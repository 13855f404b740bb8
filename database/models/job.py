import uuid

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Boolean, Numeric, Uuid, UniqueConstraint, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Company(Base):
    __tablename__ = 'companies'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    industry = Column(Text)

    jobs = relationship("Job", back_populates="company")


class Job(Base):
    __tablename__ = 'jobs'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_id = Column(Uuid(as_uuid=True), ForeignKey('companies.id', ondelete='CASCADE'), nullable=True)

    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default='')

    city = Column(Text)
    state = Column(Text)
    country = Column(Text)
    remote_option = Column(Text)  # remote|hybrid|onsite|flexible

    salary_min = Column(Integer)
    salary_max = Column(Integer)
    employment_type = Column(Text)  # full-time|part-time|contract|internship
    experience_level = Column(Text)  # entry|mid|senior|lead|executive

    status = Column(Text, nullable=False, default='draft')  # draft|active|closed|cancelled

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())
    expires_at = Column(DateTime(timezone=True))

    company = relationship("Company", back_populates="jobs")
    skills = relationship("JobSkill", back_populates="job", cascade="all, delete-orphan")
    matches = relationship("JobMatch", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'active', 'closed', 'cancelled')", name='ck_jobs_status'),
        CheckConstraint(
            "remote_option IS NULL OR remote_option IN ('remote', 'hybrid', 'onsite', 'flexible')",
            name='ck_jobs_remote_option'
        ),
        CheckConstraint(
            "experience_level IS NULL OR experience_level IN ('entry', 'mid', 'senior', 'lead', 'executive')",
            name='ck_jobs_experience_level'
        ),
        Index('idx_jobs_status', 'status'),
        Index('idx_jobs_created_at', 'created_at'),
    )


class JobSkill(Base):
    """
    One skill requirement of a job. required=False marks a preferred skill.
    """
    __tablename__ = 'job_skills'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid(as_uuid=True), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid(as_uuid=True), ForeignKey('skills.id', ondelete='CASCADE'), nullable=False)

    weight = Column(Numeric(3, 2), nullable=False, default=1.0)  # 0-1
    minimum_score = Column(Numeric(5, 2), nullable=False, default=60.0)  # 0-100
    required = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    job = relationship("Job", back_populates="skills")
    skill = relationship("Skill")

    __table_args__ = (
        UniqueConstraint('job_id', 'skill_id', name='uq_job_skills_job_skill'),
        Index('idx_job_skills_job_id', 'job_id'),
    )
