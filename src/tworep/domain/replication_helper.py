"""Stable interface between replication algorithms and the database arms.

The helper owns the run's committer and is the only sanctioned path for record
mutation, single-record lookup and event logging while a replication run is active.
Mutations are forwarded to the committer verbatim so that switching committer
variants changes transactional behaviour without touching replicators.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from tworep.domain.committers import resolve_committer
from tworep.domain.model import Arm, EventLogEntry, to_json, to_jsonable
from tworep.domain.record_loader import TypeCastingCursor

if TYPE_CHECKING:
    from collections.abc import Mapping

    from tworep.config import ReplicationConfig
    from tworep.domain.model import Difference, Record, RowKey
    from tworep.domain.ports import Committer, CommitterFactory, ReplicationSession

log = logging.getLogger(__name__)

REPLICATION_ACTIVITY = "replication"


def render_diff_key(key: RowKey) -> Any:
    """Render a primary key for the event log.

    A single-column key is stored as its bare value. Wider keys are rendered as a compact
    JSON object in key-column order, e.g. ``{"id":1,"tenant":"a"}``. Binary values are
    rendered as base64 text in both forms.
    """

    if len(key) == 1:
        value = next(iter(key.values()))
        return to_jsonable(value) if isinstance(value, bytes) else value
    return to_json(dict(key))


def truncate(value: str | None, max_length: int) -> str | None:
    if value is None:
        return None
    return value[:max_length]


class ReplicationHelper:
    """Coordinates committer, record loading and event logging for one run."""

    def __init__(
        self,
        session: ReplicationSession,
        *,
        config: ReplicationConfig | None = None,
        committers: Mapping[str, CommitterFactory] | None = None,
    ) -> None:
        self.session = session
        self.config = config or session.config
        committer_factory = resolve_committer(self.config.committer, committers)
        # constructing the committer may open the run's transactions
        self._committer: Committer = committer_factory(session)
        log.debug("Using committer %r for replication", self.config.committer)

    def corresponding_table(self, arm: Arm, table: str) -> str:
        return self.session.corresponding_table(arm, table)

    def insert_record(self, arm: Arm, table: str, values: Record) -> None:
        self._committer.insert_record(arm, table, values)

    def update_record(
        self, arm: Arm, table: str, values: Record, old_key: RowKey | None = None
    ) -> None:
        """Update a record; ``old_key`` addresses the row when the update changes its key."""

        self._committer.update_record(arm, table, values, old_key)

    def delete_record(self, arm: Arm, table: str, values: Record) -> None:
        self._committer.delete_record(arm, table, values)

    def load_record(self, arm: Arm, table: str, key: RowKey) -> Record | None:
        """Load the record of ``table`` identified by the primary key ``key``.

        ``key`` must cover the full primary key; only the first matching row is read.
        Returns ``None`` when no row matches.
        """

        database = self.session.arm(arm)
        query = database.table_select_query(table, row_keys=[key])
        with TypeCastingCursor(database, table, database.select_cursor(query)) as cursor:
            return cursor.next_row() if cursor.has_next() else None

    def finalize(self, success: bool = True) -> None:
        """Ask the committer to commit (``success``) or discard the run's changes."""

        self._committer.finalize(success)

    def build_log_entry(
        self,
        diff: Difference,
        outcome: str,
        details: str | None = None,
        *,
        now: datetime | None = None,
    ) -> EventLogEntry:
        arm, change = diff.primary_change()
        table = change.table if arm is Arm.LEFT else self.corresponding_table(arm, change.table)
        left_change = diff.change(Arm.LEFT)
        right_change = diff.change(Arm.RIGHT)
        return EventLogEntry(
            activity=REPLICATION_ACTIVITY,
            rep_table=table,
            diff_type=str(diff.type),
            diff_key=render_diff_key(change.key),
            left_change_type=str(left_change.type) if left_change else None,
            right_change_type=str(right_change.type) if right_change else None,
            rep_outcome=outcome,
            rep_details=truncate(details, self.config.rep_details_size),
            rep_time=now or datetime.now(tz=UTC),
            diff_dump=diff.dump()[: self.config.diff_dump_size],
        )

    def log_replication_outcome(
        self, diff: Difference, outcome: str, details: str | None = None
    ) -> None:
        """Append the outcome of replicating ``diff`` to the left arm's event log."""

        entry = self.build_log_entry(diff, outcome, details)
        log.debug(
            "Logging %s outcome for %s key %r", outcome, entry.rep_table, entry.diff_key
        )
        self.insert_record(Arm.LEFT, self.config.event_log_table, entry.as_values())
