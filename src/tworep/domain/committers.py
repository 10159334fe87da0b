"""Committer variants deciding when replicated changes become durable.

Every variant opens its transactional scope (or none) in ``__init__`` and applies each
mutation as one change against the named arm. Database errors propagate unchanged.
``finalize`` may be called exactly once; afterwards every call is rejected with
``CommitterFinalizedError``.

Registered variants:

- ``default``: commit every change immediately.
- ``deferred``: one transaction per arm for the whole run, committed by ``finalize(True)``.
- ``buffered``: like ``deferred`` but commits every ``commit_frequency`` changes.
- ``never``: like ``deferred`` but always rolls back (dry runs).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from tworep.config import ConfigurationError
from tworep.domain.errors import CommitterFinalizedError
from tworep.domain.model import Arm

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from tworep.domain.model import Record, RowKey
    from tworep.domain.ports import CommitterFactory, DatabaseArm, ReplicationSession

log = logging.getLogger(__name__)

TFactory = TypeVar("TFactory", bound="CommitterFactory")


class UnknownCommitterError(ConfigurationError):
    """Raised when the configured committer name is not registered."""


COMMITTERS: dict[str, CommitterFactory] = {}


def register_committer(
    name: str,
) -> Callable[[TFactory], TFactory]:
    """Register a committer factory under ``name`` (usable as a class decorator)."""

    def decorator(factory: TFactory) -> TFactory:
        if name in COMMITTERS:
            raise ValueError(f"Committer {name!r} is already registered")
        COMMITTERS[name] = factory
        return factory

    return decorator


def resolve_committer(
    name: str, registry: Mapping[str, CommitterFactory] | None = None
) -> CommitterFactory:
    committers = COMMITTERS if registry is None else registry
    try:
        return committers[name]
    except KeyError:
        known = ", ".join(sorted(committers)) or "<none>"
        raise UnknownCommitterError(
            f"Unknown committer {name!r}; registered committers: {known}"
        ) from None


class BaseCommitter:
    """Shared bookkeeping: change counting and the single-finalize guard."""

    def __init__(self, session: ReplicationSession) -> None:
        self.session = session
        self.change_count = 0
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _ensure_open(self) -> None:
        if self._finalized:
            raise CommitterFinalizedError(f"{type(self).__name__} has already been finalized")

    def _arms(self) -> tuple[DatabaseArm, DatabaseArm]:
        return self.session.left, self.session.right

    def insert_record(self, arm: Arm, table: str, values: Record) -> None:
        self._ensure_open()
        self._apply(arm, lambda database: database.insert_record(table, values))

    def update_record(
        self, arm: Arm, table: str, values: Record, old_key: RowKey | None = None
    ) -> None:
        self._ensure_open()
        self._apply(arm, lambda database: database.update_record(table, values, old_key))

    def delete_record(self, arm: Arm, table: str, values: Record) -> None:
        self._ensure_open()
        self._apply(arm, lambda database: database.delete_record(table, values))

    def _apply(self, arm: Arm, change: Callable[[DatabaseArm], None]) -> None:
        change(self.session.arm(Arm(arm)))
        self.change_count += 1

    def finalize(self, success: bool = True) -> None:
        self._ensure_open()
        self._finalized = True
        self._finish(success)
        log.info(
            "%s finalized (success=%s) after %d change(s)",
            type(self).__name__,
            success,
            self.change_count,
        )

    def _finish(self, success: bool) -> None:
        for database in self._arms():
            if success:
                database.commit()
            else:
                database.rollback()


@register_committer("default")
class ImmediateCommitter(BaseCommitter):
    """Commits each change on its own; nothing is left pending between changes."""

    def _apply(self, arm: Arm, change: Callable[[DatabaseArm], None]) -> None:
        database = self.session.arm(Arm(arm))
        try:
            change(database)
        except Exception:
            database.rollback()
            raise
        database.commit()
        self.change_count += 1


@register_committer("deferred")
class DeferredCommitter(BaseCommitter):
    """Keeps one transaction open per arm for the whole run."""

    def __init__(self, session: ReplicationSession) -> None:
        super().__init__(session)
        begun: list[DatabaseArm] = []
        try:
            for database in self._arms():
                database.begin_transaction()
                begun.append(database)
        except Exception:
            for database in begun:
                database.rollback()
            raise


@register_committer("buffered")
class BufferedCommitter(DeferredCommitter):
    """Deferred committer that commits both arms every ``commit_frequency`` changes."""

    def __init__(self, session: ReplicationSession) -> None:
        super().__init__(session)
        self.commit_frequency = session.config.commit_frequency

    def _apply(self, arm: Arm, change: Callable[[DatabaseArm], None]) -> None:
        super()._apply(arm, change)
        if self.change_count % self.commit_frequency == 0:
            log.debug("Committing buffered changes after %d change(s)", self.change_count)
            for database in self._arms():
                database.commit()
                database.begin_transaction()


@register_committer("never")
class NeverCommitter(DeferredCommitter):
    """Applies changes inside a transaction that is always rolled back."""

    def _finish(self, success: bool) -> None:
        _ = success
        super()._finish(False)
