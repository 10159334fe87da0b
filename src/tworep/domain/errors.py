"""Domain error definitions."""

from __future__ import annotations


class ReplicationError(RuntimeError):
    """Base class for errors raised by the replication coordination layer."""


class CommitterFinalizedError(ReplicationError):
    """Raised when a committer is used or finalized after it was finalized."""


class NoMoreRowsError(ReplicationError):
    """Raised when a record cursor is asked for a row it does not have."""


class RunAlreadyStartedError(ReplicationError):
    """Raised when a replication run is executed more than once."""


class MissingPrimaryKeyError(ReplicationError):
    """Raised when a replicated table has no primary key or a key does not cover it."""
