import uuid

from sqlalchemy import Column, Text, Integer, Numeric, DateTime, ForeignKey, Uuid, JSON, UniqueConstraint, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class JobMatch(Base):
    """
    A ranked candidate for a job.

    Created or refreshed by CalculateJobMatches; afterwards only the status
    lifecycle touches status, reviewed_at and contacted_at.
    """
    __tablename__ = 'job_matches'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(Uuid(as_uuid=True), ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)

    overall_score = Column(Numeric(5, 2), nullable=False)  # 0-100
    match_rank = Column(Integer)  # 1 = best; NULL for kept matches that no longer qualify
    skill_breakdown = Column(JSON, nullable=False, default=list)

    status = Column(Text, nullable=False, default='matched')
    status_updated_by = Column(Text)
    reviewed_at = Column(DateTime(timezone=True))
    contacted_at = Column(DateTime(timezone=True))

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    job = relationship("Job", back_populates="matches")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint('job_id', 'user_id', name='uq_job_matches_job_user'),
        CheckConstraint(
            "status IN ('matched', 'viewed', 'contacted', 'shortlisted', 'interviewing', 'rejected', 'hired')",
            name='ck_job_matches_status'
        ),
        Index('idx_job_matches_user_id', 'user_id'),
        Index('idx_job_matches_score', 'overall_score'),
        Index('idx_job_matches_rank', 'job_id', 'match_rank'),
    )
