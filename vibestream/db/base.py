# ============================================================================
# FILE: vibestream/db/base.py
# ============================================================================
from datetime import datetime, timezone

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models"""
    pass


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite returns naive datetimes so we store them that way"""
    return datetime.now(timezone.utc).replace(tzinfo=None)
