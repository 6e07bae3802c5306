"""
Column helpers shared by every model.

All timestamps are UTC. SQLite hands back naive datetimes, so anything that
compares a stored timestamp against "now" goes through as_utc() first.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Integer, false, text, true
from sqlalchemy.orm import mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def created_at_column():
    return mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=text("CURRENT_TIMESTAMP"),
    )


def flag_column(default: bool):
    # Real booleans; SQLite stores them as 0/1 underneath
    return mapped_column(
        Boolean,
        nullable=False,
        default=default,
        server_default=true() if default else false(),
    )


def sort_order_column():
    return mapped_column(Integer, nullable=False, default=0, server_default=text("0"))
