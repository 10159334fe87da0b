"""SQLAlchemy adapter package for tworep."""

from __future__ import annotations

from .arm import SqlAlchemyDatabaseArm
from .schema import UTCDateTime, create_event_log_table, event_log_table

__all__ = [
    "SqlAlchemyDatabaseArm",
    "UTCDateTime",
    "create_event_log_table",
    "event_log_table",
]
