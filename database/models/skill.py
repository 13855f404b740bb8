import uuid

from sqlalchemy import Column, Text, Boolean, Numeric, DateTime, ForeignKey, Uuid, UniqueConstraint, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class Skill(Base):
    __tablename__ = 'skills'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False, unique=True)
    category = Column(Text, nullable=False, default='general')
    active = Column(Boolean, nullable=False, default=True)


class UserSkillScore(Base):
    """
    A candidate's score on one skill, from an interview or entered manually.

    Expired rows are kept for history but never used for matching.
    """
    __tablename__ = 'user_skill_scores'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    skill_id = Column(Uuid(as_uuid=True), ForeignKey('skills.id', ondelete='CASCADE'), nullable=False)

    score = Column(Numeric(5, 2), nullable=False)  # 0-100
    percentile = Column(Numeric(5, 2))
    source = Column(Text, nullable=False, default='interview')  # interview|manual

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)

    user = relationship("User", back_populates="skill_scores")
    skill = relationship("Skill")

    __table_args__ = (
        UniqueConstraint('user_id', 'skill_id', name='uq_user_skill_scores_user_skill'),
        CheckConstraint("source IN ('interview', 'manual')", name='ck_user_skill_scores_source'),
        Index('idx_user_skill_scores_user_id', 'user_id'),
        Index('idx_user_skill_scores_expires_at', 'expires_at'),
    )
