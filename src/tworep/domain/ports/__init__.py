"""Domain port definitions for adapters and committers."""

from __future__ import annotations

from .committer import Committer, CommitterFactory
from .database import DatabaseArm, RowCursor
from .session import ReplicationSession

__all__ = [
    "Committer",
    "CommitterFactory",
    "DatabaseArm",
    "ReplicationSession",
    "RowCursor",
]
