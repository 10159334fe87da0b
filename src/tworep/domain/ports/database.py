"""Ports describing one database arm and its raw cursors."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.types import TypeEngine

    from tworep.domain.model import Record, RowKey


@runtime_checkable
class RowCursor(Protocol):
    """Forward-only cursor yielding column-name keyed rows."""

    def fetchone(self) -> Mapping[str, Any] | None: ...

    def close(self) -> None: ...


@runtime_checkable
class DatabaseArm(Protocol):
    """Connection to one side of the replication.

    Mutations address exactly one row by primary key. Transaction control is explicit:
    ``begin_transaction`` opens a scope if none is open, ``commit``/``rollback`` end
    whatever scope is open (and are no-ops otherwise).
    """

    @property
    def name(self) -> str: ...

    def table_select_query(self, table: str, *, row_keys: Sequence[RowKey]) -> Any: ...

    def select_cursor(self, query: Any) -> RowCursor: ...

    def primary_key_names(self, table: str) -> tuple[str, ...]: ...

    def column_types(self, table: str) -> Mapping[str, TypeEngine[Any]]: ...

    def insert_record(self, table: str, values: Record) -> None: ...

    def update_record(self, table: str, values: Record, old_key: RowKey | None = None) -> None: ...

    def delete_record(self, table: str, values: Record) -> None: ...

    def begin_transaction(self) -> None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...
