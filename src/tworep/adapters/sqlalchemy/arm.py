"""SQLAlchemy Core implementation of one database arm."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import MetaData, Table, and_, delete, false, insert, or_, select, update

from tworep.domain.errors import MissingPrimaryKeyError

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.engine import Connection, Engine
    from sqlalchemy.types import TypeEngine

    from tworep.domain.model import Record, RowKey
    from tworep.domain.ports import RowCursor

log = logging.getLogger(__name__)


class SqlAlchemyDatabaseArm:
    """One database arm bound to a single lazily opened connection.

    Tables are reflected on first use and cached; tables already defined on the given
    ``metadata`` are used as defined. The connection auto-begins a transaction on first
    use and keeps it until ``commit``/``rollback``.
    """

    def __init__(self, engine: Engine, name: str, *, metadata: MetaData | None = None) -> None:
        self.engine = engine
        self._name = name
        self.metadata = metadata if metadata is not None else MetaData()
        self._connection: Connection | None = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def connection(self) -> Connection:
        if self._connection is None:
            self._connection = self.engine.connect()
        return self._connection

    def table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            log.debug("Reflecting table %s on %s arm", name, self._name)
            table = Table(name, self.metadata, autoload_with=self.connection)
        return table

    def primary_key_names(self, table: str) -> tuple[str, ...]:
        names = tuple(column.name for column in self.table(table).primary_key.columns)
        if not names:
            raise MissingPrimaryKeyError(
                f"Table {table!r} on the {self._name} arm has no primary key"
            )
        return names

    def column_types(self, table: str) -> Mapping[str, TypeEngine[Any]]:
        return {column.name: column.type for column in self.table(table).columns}

    def _key_clause(self, table: Table, key: RowKey) -> ColumnElement[bool]:
        primary_key = set(self.primary_key_names(table.name))
        if set(key) != primary_key:
            raise MissingPrimaryKeyError(
                f"Key columns {sorted(key)} do not match the primary key "
                f"{sorted(primary_key)} of {table.name!r}"
            )
        return and_(*(table.c[column] == value for column, value in key.items()))

    def _own_key(self, table: Table, values: Record) -> dict[str, Any]:
        names = self.primary_key_names(table.name)
        missing = [name for name in names if name not in values]
        if missing:
            raise MissingPrimaryKeyError(
                f"Values for {table.name!r} lack primary key column(s): {', '.join(missing)}"
            )
        return {name: values[name] for name in names}

    def table_select_query(self, table: str, *, row_keys: Sequence[RowKey]) -> Select[Any]:
        """Select the rows of ``table`` matching any of ``row_keys`` (full primary keys)."""

        selected = self.table(table)
        if not row_keys:
            return select(selected).where(false())
        return select(selected).where(or_(*(self._key_clause(selected, key) for key in row_keys)))

    def select_cursor(self, query: Select[Any]) -> RowCursor:
        return self.connection.execute(query).mappings()

    def insert_record(self, table: str, values: Record) -> None:
        self.connection.execute(insert(self.table(table)).values(values))

    def update_record(self, table: str, values: Record, old_key: RowKey | None = None) -> None:
        target = self.table(table)
        key = old_key if old_key is not None else self._own_key(target, values)
        self.connection.execute(
            update(target).where(self._key_clause(target, key)).values(values)
        )

    def delete_record(self, table: str, values: Record) -> None:
        target = self.table(table)
        key = self._own_key(target, values)
        self.connection.execute(delete(target).where(self._key_clause(target, key)))

    def begin_transaction(self) -> None:
        if not self.connection.in_transaction():
            self.connection.begin()

    def commit(self) -> None:
        if self._connection is not None:
            self._connection.commit()

    def rollback(self) -> None:
        if self._connection is not None:
            self._connection.rollback()

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
