#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Skip the SQLite-backed repository tests
    python -m pytest tests/ -v -m "not db"

    # Using unittest
    python -m unittest discover tests -v

Repository and API tests run against an in-memory SQLite database, so no
external services are needed. Set TEST_DATABASE_URL to point the repository
tests at PostgreSQL instead.
"""

import os

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

TEST_DB_URL = os.environ.get("TEST_DATABASE_URL", "sqlite://")


def create_test_engine(url: str = TEST_DB_URL):
    """
    Engine with every table created.

    In-memory SQLite gets a StaticPool so all sessions (and threads) share
    one connection, otherwise each connection would see an empty database.
    """
    from database.models import Base

    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool
        )
    else:
        engine = create_engine(url)

    Base.metadata.create_all(engine)
    return engine


def create_test_session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
