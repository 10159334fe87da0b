from __future__ import annotations

from tests.helpers.arms import FakeArm, make_fake_session
from tworep.config import ReplicationConfig
from tworep.domain.model import Arm


def test_corresponding_table_maps_left_to_right() -> None:
    session = make_fake_session(ReplicationConfig(table_map={"orders": "invoices"}))

    assert session.corresponding_table(Arm.LEFT, "orders") == "invoices"
    assert session.corresponding_table(Arm.RIGHT, "invoices") == "orders"


def test_unmapped_tables_keep_their_name() -> None:
    session = make_fake_session(ReplicationConfig(table_map={"orders": "invoices"}))

    assert session.corresponding_table(Arm.LEFT, "customers") == "customers"
    assert session.corresponding_table(Arm.RIGHT, "customers") == "customers"


def test_arm_accessors_and_options() -> None:
    config = ReplicationConfig(rep_prefix="sync")
    session = make_fake_session(config)

    assert session.arm(Arm.LEFT) is session.left
    assert session.arm(Arm("right")) is session.right
    assert session.options is config


def test_close_closes_both_arms() -> None:
    session = make_fake_session()

    session.close()

    for database in (session.left, session.right):
        assert isinstance(database, FakeArm)
        assert database.event_names() == ["close"]
