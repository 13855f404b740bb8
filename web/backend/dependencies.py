#!/usr/bin/env python3
"""
FastAPI dependencies for dependency injection.
"""

from functools import lru_cache
from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from core.app_context import build_matching_service
from core.matching.service import MatchingService
from core.matching.tasks import MatchingTaskQueue
from database.database import SessionLocal
from database.repository import MatchingRepository
from .config import get_config, get_config_path


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session.

    Yields:
        Session: Database session that will be automatically closed.
    """
    session = SessionLocal(get_config().database.url)
    try:
        yield session
    finally:
        session.close()


def get_repository(db: Session = Depends(get_db)) -> MatchingRepository:
    return MatchingRepository(db)


def get_matching_service(repo: MatchingRepository = Depends(get_repository)) -> MatchingService:
    """
    FastAPI dependency that wires a MatchingService onto the request session.

    Usage:
        @router.get("/endpoint")
        def my_endpoint(service: MatchingService = Depends(get_matching_service)):
            ...
    """
    return build_matching_service(repo, get_config().matching)


@lru_cache()
def get_task_queue() -> MatchingTaskQueue:
    """Process-wide queue handle; connects to Redis on first use."""
    return MatchingTaskQueue(get_config().matching.queue, get_config_path())
