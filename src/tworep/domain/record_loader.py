"""Typed record loading on top of raw forward-only cursors."""

from __future__ import annotations

from functools import cache
from typing import TYPE_CHECKING, Any, Literal, TypeAlias

from pydantic import ConfigDict, TypeAdapter

from tworep.domain.errors import NoMoreRowsError

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from types import TracebackType

    from sqlalchemy.types import TypeEngine

    from tworep.domain.model import Record
    from tworep.domain.ports import DatabaseArm, RowCursor

Caster: TypeAlias = "Callable[[Any], Any]"

# lax validation: "3" -> 3 and b"abc" -> "abc", but 3.7 is rejected for integer columns
_COERCION_CONFIG = ConfigDict(coerce_numbers_to_str=True)


@cache
def _adapter_for(python_type: type[Any]) -> TypeAdapter[Any]:
    if python_type is str:
        return TypeAdapter(str, config=_COERCION_CONFIG)
    return TypeAdapter(python_type)


def caster_for(type_: TypeEngine[Any]) -> Caster | None:
    """Return the coercion for values of a column of ``type_`` (``None`` means pass-through).

    Values that cannot be converted without losing information raise
    ``pydantic.ValidationError``.
    """

    try:
        python_type: type[Any] = type_.python_type
    except NotImplementedError:
        return None
    try:
        adapter = _adapter_for(python_type)
    except TypeError:
        return None

    def cast(value: Any) -> Any:
        if value is None:
            return None
        return adapter.validate_python(value)

    return cast


class TypeCastingCursor:
    """Wrap a raw cursor and coerce each column to the Python type of its table column.

    Only columns known to the arm's schema for ``table`` are coerced; everything else
    passes through untouched. ``clear`` releases the raw cursor and may be called any
    number of times; the cursor is also a context manager that clears on exit.
    """

    def __init__(self, arm: DatabaseArm, table: str, cursor: RowCursor) -> None:
        self.table = table
        self._cursor: RowCursor | None = cursor
        self._pending: Mapping[str, Any] | None = None
        try:
            self._casters = self._build_casters(arm.column_types(table))
        except Exception:
            self.clear()
            raise

    @staticmethod
    def _build_casters(column_types: Mapping[str, TypeEngine[Any]]) -> dict[str, Caster]:
        casters: dict[str, Caster] = {}
        for column, type_ in column_types.items():
            caster = caster_for(type_)
            if caster is not None:
                casters[column] = caster
        return casters

    def __enter__(self) -> TypeCastingCursor:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        self.clear()
        return False

    def has_next(self) -> bool:
        """Return whether another row is available without consuming it."""

        if self._pending is None and self._cursor is not None:
            self._pending = self._cursor.fetchone()
        return self._pending is not None

    def next_row(self) -> Record:
        row = self._pending if self.has_next() else None
        if row is None:
            raise NoMoreRowsError(f"No more rows in cursor for table {self.table!r}")
        self._pending = None
        return self._cast_row(row)

    def _cast_row(self, row: Mapping[str, Any]) -> Record:
        record: Record = {}
        for column, value in row.items():
            caster = self._casters.get(column)
            record[column] = caster(value) if caster is not None else value
        return record

    def clear(self) -> None:
        if self._cursor is None:
            return
        cursor, self._cursor = self._cursor, None
        self._pending = None
        cursor.close()
