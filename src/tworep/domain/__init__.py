"""Public replication domain surface."""

from __future__ import annotations

from tworep.domain.committers import COMMITTERS, UnknownCommitterError, register_committer
from tworep.domain.errors import (
    CommitterFinalizedError,
    MissingPrimaryKeyError,
    NoMoreRowsError,
    ReplicationError,
    RunAlreadyStartedError,
)
from tworep.domain.model import (
    Arm,
    Change,
    ChangeType,
    Difference,
    DiffType,
    EventLogEntry,
    Record,
    RowKey,
)
from tworep.domain.replication_helper import ReplicationHelper
from tworep.domain.replication_run import ReplicationRun, ReplicationRunResult
from tworep.domain.replicators import OneWayReplicator, Replicator
from tworep.domain.session import Session

__all__ = [
    "COMMITTERS",
    "Arm",
    "Change",
    "ChangeType",
    "CommitterFinalizedError",
    "DiffType",
    "Difference",
    "EventLogEntry",
    "MissingPrimaryKeyError",
    "NoMoreRowsError",
    "OneWayReplicator",
    "Record",
    "ReplicationError",
    "ReplicationHelper",
    "ReplicationRun",
    "ReplicationRunResult",
    "Replicator",
    "RowKey",
    "Session",
    "UnknownCommitterError",
    "register_committer",
]
