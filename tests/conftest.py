from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine  # noqa: TC002

from tests.helpers.databases import create_order_tables
from tworep.app import open_session
from tworep.config import ReplicationConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

    from tworep.domain.session import Session


@pytest.fixture
def left_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'left.db'}", future=True)
    create_order_tables(engine, orders_table="orders")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def right_engine(tmp_path: Path) -> Iterator[Engine]:
    engine = create_engine(f"sqlite+pysqlite:///{tmp_path / 'right.db'}", future=True)
    create_order_tables(engine, orders_table="invoices")
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def sqlite_session_factory(
    left_engine: Engine,
    right_engine: Engine,
) -> Iterator[Callable[..., Session]]:
    """Open sessions on the two SQLite arms, mapping ``orders`` to ``invoices``."""

    sessions: list[Session] = []

    def factory(**overrides: Any) -> Session:
        options: dict[str, Any] = {"table_map": {"orders": "invoices"}, **overrides}
        session = open_session(
            config=ReplicationConfig(**options),
            left_engine=left_engine,
            right_engine=right_engine,
        )
        sessions.append(session)
        return session

    try:
        yield factory
    finally:
        for session in sessions:
            session.close()
