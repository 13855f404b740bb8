import uuid

from sqlalchemy import Column, Text, Boolean, Integer, DateTime, Date, ForeignKey, Uuid, CheckConstraint, Index, func
from sqlalchemy.orm import relationship

from .base import Base


class User(Base):
    """
    User account. Only role='candidate' users take part in matching.
    """
    __tablename__ = 'users'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(Text, nullable=False, unique=True)
    first_name = Column(Text, nullable=False, default='')
    last_name = Column(Text, nullable=False, default='')
    role = Column(Text, nullable=False)  # candidate|employer|admin
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    profile = relationship("CandidateProfile", back_populates="user", uselist=False, cascade="all, delete-orphan")
    skill_scores = relationship("UserSkillScore", back_populates="user", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("role IN ('candidate', 'employer', 'admin')", name='ck_users_role'),
        Index('idx_users_role', 'role'),
    )


class CandidateProfile(Base):
    """
    Candidate profile data consumed by the bonus calculations.
    """
    __tablename__ = 'candidate_profiles'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True)

    headline = Column(Text)
    summary = Column(Text)
    years_experience = Column(Integer)

    # Location / remote fit
    city = Column(Text)
    state = Column(Text)
    country = Column(Text)
    willing_to_relocate = Column(Boolean, nullable=False, default=False)
    remote_preference = Column(Text)  # remote|hybrid|onsite|flexible

    profile_visibility = Column(Text, nullable=False, default='public')  # public|private|anonymous

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="profile")
    education = relationship("Education", back_populates="profile", cascade="all, delete-orphan")
    work_experience = relationship("WorkExperience", back_populates="profile", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint(
            "remote_preference IS NULL OR remote_preference IN ('remote', 'hybrid', 'onsite', 'flexible')",
            name='ck_candidate_profiles_remote_preference'
        ),
        CheckConstraint(
            "profile_visibility IN ('public', 'private', 'anonymous')",
            name='ck_candidate_profiles_visibility'
        ),
        Index('idx_candidate_profiles_location', 'city', 'state', 'country'),
    )


class Education(Base):
    __tablename__ = 'education'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid(as_uuid=True), ForeignKey('candidate_profiles.id', ondelete='CASCADE'), nullable=False)
    degree = Column(Text, nullable=False)  # bachelors|masters|phd|associate|...
    field_of_study = Column(Text)
    institution = Column(Text, nullable=False, default='')
    graduation_year = Column(Integer)

    profile = relationship("CandidateProfile", back_populates="education")


class WorkExperience(Base):
    __tablename__ = 'work_experience'

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    profile_id = Column(Uuid(as_uuid=True), ForeignKey('candidate_profiles.id', ondelete='CASCADE'), nullable=False)
    title = Column(Text, nullable=False)
    company = Column(Text, nullable=False, default='')
    start_date = Column(Date)
    end_date = Column(Date)
    is_current = Column(Boolean, nullable=False, default=False)
    description = Column(Text)

    profile = relationship("CandidateProfile", back_populates="work_experience")
