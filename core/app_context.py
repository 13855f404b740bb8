from dataclasses import dataclass
from typing import Optional

from core.config_loader import AppConfig, MatchingConfig
from core.matching.service import MatchingService
from core.matching.tasks import MatchingTaskQueue


def build_matching_service(repo, config: Optional[MatchingConfig] = None) -> MatchingService:
    """Wire a MatchingService onto the providers of a MatchingRepository."""
    return MatchingService(
        skills=repo.skills,
        profiles=repo.candidates,
        jobs=repo.jobs,
        candidates=repo.candidates,
        matches=repo.matches,
        config=config
    )


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    DB access should be obtained via matching_uow() per request or batch;
    the context itself holds no session.
    """
    config: AppConfig
    task_queue: MatchingTaskQueue

    @classmethod
    def build(cls, config: AppConfig, config_path: Optional[str] = None) -> "AppContext":
        return cls(
            config=config,
            task_queue=MatchingTaskQueue(config.matching.queue, config_path)
        )

    def matching_service(self, repo) -> MatchingService:
        return build_matching_service(repo, self.config.matching)
