"""Per-run replication session holding both database arms."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from tworep.config import ReplicationConfig
from tworep.domain.model import Arm

if TYPE_CHECKING:
    from tworep.domain.ports import DatabaseArm

log = logging.getLogger(__name__)


class Session:
    """Both database arms, the run configuration, and the table-name correspondence.

    ``config.table_map`` maps left table names to right table names. Tables that are not
    mapped keep their name on the counterpart arm; lookups never fail.
    """

    def __init__(
        self,
        left: DatabaseArm,
        right: DatabaseArm,
        config: ReplicationConfig | None = None,
    ) -> None:
        self._arms = {Arm.LEFT: left, Arm.RIGHT: right}
        self._config = config or ReplicationConfig()
        self._left_by_right = {
            right_name: left_name for left_name, right_name in self._config.table_map.items()
        }

    @property
    def config(self) -> ReplicationConfig:
        return self._config

    @property
    def options(self) -> ReplicationConfig:
        return self._config

    @property
    def left(self) -> DatabaseArm:
        return self._arms[Arm.LEFT]

    @property
    def right(self) -> DatabaseArm:
        return self._arms[Arm.RIGHT]

    def arm(self, arm: Arm) -> DatabaseArm:
        return self._arms[Arm(arm)]

    def corresponding_table(self, arm: Arm, table: str) -> str:
        """Return the name ``table`` (of ``arm``) carries on the counterpart arm."""

        if Arm(arm) is Arm.LEFT:
            return self._config.table_map.get(table, table)
        return self._left_by_right.get(table, table)

    def close(self) -> None:
        for arm, database in self._arms.items():
            log.debug("Closing %s arm %s", arm, database.name)
            database.close()
