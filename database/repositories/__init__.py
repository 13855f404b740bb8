from database.repositories.base import BaseRepository
from database.repositories.skill import SkillScoreRepository
from database.repositories.candidate import CandidateRepository
from database.repositories.job import JobRepository
from database.repositories.match import MatchRepository

__all__ = [
    'BaseRepository',
    'SkillScoreRepository',
    'CandidateRepository',
    'JobRepository',
    'MatchRepository',
]
