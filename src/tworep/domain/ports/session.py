"""Port describing the per-run replication session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from tworep.config import ReplicationConfig
    from tworep.domain.model import Arm

    from .database import DatabaseArm


class ReplicationSession(Protocol):
    """Both database arms plus the configuration of one run (read-only for callers)."""

    @property
    def config(self) -> ReplicationConfig: ...

    @property
    def left(self) -> DatabaseArm: ...

    @property
    def right(self) -> DatabaseArm: ...

    def arm(self, arm: Arm) -> DatabaseArm: ...

    def corresponding_table(self, arm: Arm, table: str) -> str: ...
