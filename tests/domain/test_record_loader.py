from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest
from pydantic import ValidationError
from sqlalchemy import Boolean, Date, Integer, LargeBinary, String
from sqlalchemy.types import NullType

from tests.helpers.arms import ORDER_TYPES, FakeArm, FakeCursor
from tworep.domain.errors import NoMoreRowsError
from tworep.domain.record_loader import TypeCastingCursor, caster_for


def _orders_arm() -> FakeArm:
    return FakeArm("left", types={"orders": dict(ORDER_TYPES)})


def test_next_row_coerces_raw_values_to_column_types() -> None:
    raw = FakeCursor(
        [{"id": "3", "name": 42, "amount": "12.50", "placed_at": "2024-05-01T10:30:00"}]
    )
    cursor = TypeCastingCursor(_orders_arm(), "orders", raw)

    row = cursor.next_row()

    assert row == {
        "id": 3,
        "name": "42",
        "amount": Decimal("12.50"),
        "placed_at": datetime(2024, 5, 1, 10, 30),
    }


def test_unknown_columns_and_nulls_pass_through() -> None:
    raw = FakeCursor([{"id": None, "extra": "1"}])
    cursor = TypeCastingCursor(_orders_arm(), "orders", raw)

    assert cursor.next_row() == {"id": None, "extra": "1"}


def test_has_next_does_not_consume() -> None:
    raw = FakeCursor([{"id": 1}, {"id": 2}])
    cursor = TypeCastingCursor(_orders_arm(), "orders", raw)

    assert cursor.has_next()
    assert cursor.has_next()
    assert raw.fetched == 1
    assert cursor.next_row() == {"id": 1}
    assert cursor.next_row() == {"id": 2}
    assert not cursor.has_next()


def test_next_row_on_exhausted_cursor_raises() -> None:
    cursor = TypeCastingCursor(_orders_arm(), "orders", FakeCursor([]))

    with pytest.raises(NoMoreRowsError, match="orders"):
        cursor.next_row()


def test_clear_is_idempotent() -> None:
    raw = FakeCursor([{"id": 1}])
    cursor = TypeCastingCursor(_orders_arm(), "orders", raw)

    cursor.clear()
    cursor.clear()

    assert raw.close_calls == 1
    assert not cursor.has_next()


def test_context_manager_releases_on_error() -> None:
    raw = FakeCursor([{"id": 1}], fail_on_fetch=True)

    with pytest.raises(RuntimeError, match="cursor broke"):
        with TypeCastingCursor(_orders_arm(), "orders", raw) as cursor:
            cursor.has_next()

    assert raw.close_calls == 1


def test_boolean_and_date_casters() -> None:
    to_bool = caster_for(Boolean())
    to_date = caster_for(Date())
    to_bytes = caster_for(LargeBinary())

    assert to_bool is not None
    assert to_date is not None
    assert to_bytes is not None
    assert to_bool("yes") is True
    assert to_bool(0) is False
    assert to_date(datetime(2024, 1, 2)) == date(2024, 1, 2)
    assert to_date("2024-01-02") == date(2024, 1, 2)
    assert to_bytes("abc") == b"abc"
    with pytest.raises(ValidationError, match="boolean"):
        to_bool("maybe")


def test_integer_caster_rejects_fractional_values() -> None:
    to_int = caster_for(Integer())

    assert to_int is not None
    assert to_int(7.0) == 7
    with pytest.raises(ValidationError, match="fractional"):
        to_int(3.7)


def test_string_caster_decodes_bytes() -> None:
    to_str = caster_for(String())

    assert to_str is not None
    assert to_str(b"abc") == "abc"
    assert to_str(12) == "12"


def test_types_without_python_type_pass_through() -> None:
    assert caster_for(NullType()) is None
