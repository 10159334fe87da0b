"""SQLAlchemy table metadata for the replication bookkeeping tables."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Column,
    DateTime,
    Dialect,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

    from tworep.config import ReplicationConfig

log = logging.getLogger(__name__)

NAME_LENGTH = 255


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def event_log_table(config: ReplicationConfig, metadata: MetaData | None = None) -> Table:
    """Return the ``<rep_prefix>_event_log`` table, defining it on ``metadata`` if needed."""

    metadata = metadata if metadata is not None else MetaData()
    existing = metadata.tables.get(config.event_log_table)
    if existing is not None:
        return existing
    return Table(
        config.event_log_table,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("activity", String(NAME_LENGTH), nullable=False),
        Column("rep_table", String(NAME_LENGTH), nullable=False),
        Column("diff_type", String(NAME_LENGTH), nullable=False),
        Column("diff_key", Text),
        Column("left_change_type", String(NAME_LENGTH)),
        Column("right_change_type", String(NAME_LENGTH)),
        Column("rep_outcome", String(NAME_LENGTH), nullable=False),
        Column("rep_details", String(config.rep_details_size)),
        Column("rep_time", UTCDateTime(), nullable=False),
        Column("diff_dump", String(config.diff_dump_size)),
    )


def create_event_log_table(
    engine: Engine, config: ReplicationConfig, metadata: MetaData | None = None
) -> Table:
    """Create the event log table on ``engine`` unless it already exists."""

    table = event_log_table(config, metadata)
    table.create(engine, checkfirst=True)
    log.debug("Ensured event log table %s", table.name)
    return table
