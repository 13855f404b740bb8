import uuid
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy.orm import Session


def as_uuid(value: Any) -> Optional[uuid.UUID]:
    """Coerce an id to uuid.UUID. Returns None for values that are not UUIDs."""
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError, AttributeError):
        return None


def to_float(value: Any, default: float = 0.0) -> float:
    """Convert Numeric columns (Decimal) to native float."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return float(value)
    return float(value)


class BaseRepository:
    def __init__(self, db: Session):
        self.db = db

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
