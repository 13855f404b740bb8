from sqlalchemy.orm import Session

from database.repositories import (
    CandidateRepository,
    JobRepository,
    MatchRepository,
    SkillScoreRepository,
)


class MatchingRepository:
    """
    Facade over the matching repositories, all sharing one Session.

    Each attribute implements one of the provider interfaces the matching
    engine consumes (see core.matching.interfaces).
    """

    def __init__(self, db: Session):
        self.db = db
        self.skills = SkillScoreRepository(db)
        self.candidates = CandidateRepository(db)
        self.jobs = JobRepository(db)
        self.matches = MatchRepository(db)
