from .base import Base
from .user import User, CandidateProfile, Education, WorkExperience
from .skill import Skill, UserSkillScore
from .job import Company, Job, JobSkill
from .match import JobMatch

__all__ = [
    'Base',
    'User',
    'CandidateProfile',
    'Education',
    'WorkExperience',
    'Skill',
    'UserSkillScore',
    'Company',
    'Job',
    'JobSkill',
    'JobMatch',
]
