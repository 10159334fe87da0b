"""Builders for differences used across tests."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from tworep.domain.model import Arm, Change, ChangeType, Difference, DiffType

if TYPE_CHECKING:
    from collections.abc import Mapping


def make_difference(
    *,
    left: tuple[str, Mapping[str, Any], ChangeType] | None = None,
    right: tuple[str, Mapping[str, Any], ChangeType] | None = None,
    new_key: Mapping[str, Any] | None = None,
) -> Difference:
    """Build a difference from ``(table, key, type)`` triples per arm."""

    changes: dict[Arm, Change | None] = {Arm.LEFT: None, Arm.RIGHT: None}
    if left is not None:
        table, key, change_type = left
        changes[Arm.LEFT] = Change(table=table, key=key, type=change_type, new_key=new_key)
    if right is not None:
        table, key, change_type = right
        changes[Arm.RIGHT] = Change(table=table, key=key, type=change_type)

    if left is not None and right is not None:
        diff_type = DiffType.CONFLICT
    elif left is not None:
        diff_type = DiffType.LEFT
    elif right is not None:
        diff_type = DiffType.RIGHT
    else:
        diff_type = DiffType.NO_DIFF
    return Difference(type=diff_type, changes=changes)
