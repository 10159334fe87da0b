"""Port describing transaction-boundary strategies."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, TypeAlias, runtime_checkable

if TYPE_CHECKING:
    from tworep.domain.model import Arm, Record, RowKey

    from .session import ReplicationSession


@runtime_checkable
class Committer(Protocol):
    """Decides when mutations on either arm become durable.

    Implementations open their transactional scope (if any) on construction, apply each
    mutation as one change against the named arm, and accept exactly one ``finalize``
    call after which every further call is rejected.
    """

    def insert_record(self, arm: Arm, table: str, values: Record) -> None: ...

    def update_record(
        self, arm: Arm, table: str, values: Record, old_key: RowKey | None = None
    ) -> None: ...

    def delete_record(self, arm: Arm, table: str, values: Record) -> None: ...

    def finalize(self, success: bool = True) -> None: ...


CommitterFactory: TypeAlias = "Callable[[ReplicationSession], Committer]"
