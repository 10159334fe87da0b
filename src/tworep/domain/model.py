"""Replication domain model (pure, dependency-light)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import ConfigDict, TypeAdapter

Record: TypeAlias = dict[str, Any]
RowKey: TypeAlias = Mapping[str, Any]


class Arm(StrEnum):
    """One of the two databases taking part in replication."""

    LEFT = "left"
    RIGHT = "right"

    @property
    def counterpart(self) -> Arm:
        return Arm.RIGHT if self is Arm.LEFT else Arm.LEFT


class ChangeType(StrEnum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class DiffType(StrEnum):
    """Which side(s) of a difference carry a change."""

    LEFT = "left"
    RIGHT = "right"
    CONFLICT = "conflict"
    NO_DIFF = "no_diff"


@dataclass(frozen=True, slots=True, kw_only=True)
class Change:
    """A change detected on one arm for one row.

    ``key`` identifies the row before the change. ``new_key`` is only set when an
    update modified the primary key itself.
    """

    table: str
    key: RowKey
    type: ChangeType
    new_key: RowKey | None = None

    @property
    def current_key(self) -> RowKey:
        return self.new_key if self.new_key is not None else self.key


@dataclass(frozen=True, slots=True, kw_only=True)
class Difference:
    """Immutable description of one detected mismatch between the arms."""

    type: DiffType
    changes: Mapping[Arm, Change | None] = field(default_factory=dict)

    def change(self, arm: Arm) -> Change | None:
        return self.changes.get(arm)

    def primary_change(self) -> tuple[Arm, Change]:
        """Return the left change, or the right one if the left arm did not change."""

        for arm in (Arm.LEFT, Arm.RIGHT):
            change = self.change(arm)
            if change is not None:
                return arm, change
        raise ValueError("difference carries no change on either arm")

    def dump(self) -> str:
        """Render the difference as compact JSON with a stable field order."""

        return to_json(self)


@dataclass(frozen=True, slots=True, kw_only=True)
class EventLogEntry:
    """One append-only row of the replication event log."""

    activity: str
    rep_table: str
    diff_type: str
    diff_key: Any
    left_change_type: str | None
    right_change_type: str | None
    rep_outcome: str
    rep_details: str | None
    rep_time: datetime
    diff_dump: str

    def as_values(self) -> Record:
        return {
            "activity": self.activity,
            "rep_table": self.rep_table,
            "diff_type": self.diff_type,
            "diff_key": self.diff_key,
            "left_change_type": self.left_change_type,
            "right_change_type": self.right_change_type,
            "rep_outcome": self.rep_outcome,
            "rep_details": self.rep_details,
            "rep_time": self.rep_time,
            "diff_dump": self.diff_dump,
        }


# binary key values are rendered as base64 text instead of failing on non-UTF-8 bytes
_JSON_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any, config=ConfigDict(ser_json_bytes="base64"))


def to_json(value: Any) -> str:
    """Render ``value`` as compact JSON."""

    return _JSON_ADAPTER.dump_json(value).decode()


def to_jsonable(value: Any) -> Any:
    return _JSON_ADAPTER.dump_python(value, mode="json")
