"""Application orchestration entry points."""

from __future__ import annotations

from functools import partial
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import MetaData, create_engine

from tworep.adapters.sqlalchemy import SqlAlchemyDatabaseArm, create_event_log_table
from tworep.config import get_database_config, get_replication_config
from tworep.domain.model import Arm
from tworep.domain.replication_run import ReplicationRun
from tworep.domain.replicators import OneWayReplicator
from tworep.domain.session import Session

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy.engine import Engine

    from tworep.config import DatabaseConfig, ReplicationConfig
    from tworep.domain.model import Difference
    from tworep.domain.replication_run import ReplicationRunResult, ReplicatorFactory

log = getLogger(__name__)


def open_session(
    *,
    config: ReplicationConfig | None = None,
    database_config: DatabaseConfig | None = None,
    left_engine: Engine | None = None,
    right_engine: Engine | None = None,
) -> Session:
    """Connect both arms and make sure the left arm carries the event log table."""

    replication_config = config or get_replication_config()
    if left_engine is None or right_engine is None:
        databases = database_config or get_database_config()
        left_engine = left_engine or create_engine(databases.left_uri, future=True)
        right_engine = right_engine or create_engine(databases.right_uri, future=True)

    left_metadata = MetaData()
    create_event_log_table(left_engine, replication_config, left_metadata)
    return Session(
        SqlAlchemyDatabaseArm(left_engine, Arm.LEFT, metadata=left_metadata),
        SqlAlchemyDatabaseArm(right_engine, Arm.RIGHT),
        replication_config,
    )


def replicate(
    differences: Iterable[Difference],
    *,
    session: Session | None = None,
    replicator_factory: ReplicatorFactory | None = None,
    source: Arm = Arm.LEFT,
) -> ReplicationRunResult:
    """Replicate ``differences`` in one run, by default from ``source`` to its counterpart."""

    owns_session = session is None
    active_session = session or open_session()
    factory = replicator_factory or partial(OneWayReplicator, source=source)
    log.info(
        "Starting replication: committer=%s, source=%s",
        active_session.config.committer,
        source,
    )
    try:
        return ReplicationRun(active_session).run(differences, factory)
    finally:
        if owns_session:
            active_session.close()
