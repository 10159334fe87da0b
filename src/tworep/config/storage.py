"""Database connection configuration helpers."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    left_uri: str
    right_uri: str


def get_database_config() -> DatabaseConfig:
    values = require_env_vars(("LEFT_DATABASE_URI", "RIGHT_DATABASE_URI"))
    return DatabaseConfig(
        left_uri=values["LEFT_DATABASE_URI"],
        right_uri=values["RIGHT_DATABASE_URI"],
    )
