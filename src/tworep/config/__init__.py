"""Application configuration helpers."""

from .env import require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .replication import (
    DEFAULT_COMMIT_FREQUENCY,
    DEFAULT_COMMITTER,
    DEFAULT_REP_PREFIX,
    DIFF_DUMP_SIZE,
    REP_DETAILS_SIZE,
    ReplicationConfig,
    get_replication_config,
    parse_table_map,
)
from .storage import DatabaseConfig, get_database_config

__all__ = [
    "DEFAULT_COMMITTER",
    "DEFAULT_COMMIT_FREQUENCY",
    "DEFAULT_REP_PREFIX",
    "DIFF_DUMP_SIZE",
    "REP_DETAILS_SIZE",
    "ConfigurationError",
    "DatabaseConfig",
    "MissingConfigurationError",
    "ReplicationConfig",
    "get_database_config",
    "get_replication_config",
    "parse_table_map",
    "require_env_vars",
]
