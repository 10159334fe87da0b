"""Replication run configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from .env import optional_env_var, optional_positive_int
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_COMMITTER: Final[str] = "default"
DEFAULT_REP_PREFIX: Final[str] = "rr"
REP_DETAILS_SIZE: Final[int] = 2000
DIFF_DUMP_SIZE: Final[int] = 2000
DEFAULT_COMMIT_FREQUENCY: Final[int] = 1000


@dataclass(frozen=True, slots=True)
class ReplicationConfig:
    """Options consulted by the replication helper and its committer.

    ``committer`` names the registered committer variant, ``rep_prefix`` prefixes the
    replication bookkeeping tables (the event log lives in ``<rep_prefix>_event_log``).
    ``rep_details_size`` and ``diff_dump_size`` bound the stored length of the
    corresponding event log columns. ``commit_frequency`` is only read by the
    ``buffered`` committer. ``table_map`` maps left table names to right table names;
    tables absent from it carry the same name on both arms.
    """

    committer: str = DEFAULT_COMMITTER
    rep_prefix: str = DEFAULT_REP_PREFIX
    rep_details_size: int = REP_DETAILS_SIZE
    diff_dump_size: int = DIFF_DUMP_SIZE
    commit_frequency: int = DEFAULT_COMMIT_FREQUENCY
    table_map: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.committer:
            raise ConfigurationError("committer must not be empty")
        if not self.rep_prefix:
            raise ConfigurationError("rep_prefix must not be empty")
        for name in ("rep_details_size", "diff_dump_size", "commit_frequency"):
            value = getattr(self, name)
            if value <= 0:
                raise ConfigurationError(f"{name} must be positive, got {value}")
        right_names = list(self.table_map.values())
        if len(set(right_names)) != len(right_names):
            raise ConfigurationError("table_map maps several left tables to one right table")

    @property
    def event_log_table(self) -> str:
        return f"{self.rep_prefix}_event_log"


def parse_table_map(raw: str) -> dict[str, str]:
    """Parse ``left:right`` pairs separated by commas, e.g. ``orders:invoices,items:lines``."""

    table_map: dict[str, str] = {}
    for chunk in raw.split(","):
        pair = chunk.strip()
        if not pair:
            continue
        left, sep, right = pair.partition(":")
        left, right = left.strip(), right.strip()
        if not sep or not left or not right:
            raise ConfigurationError(f"Invalid table mapping entry: {pair!r}")
        if left in table_map:
            raise ConfigurationError(f"Duplicate table mapping for {left!r}")
        table_map[left] = right
    return table_map


def get_replication_config() -> ReplicationConfig:
    raw_map = optional_env_var("TWOREP_TABLE_MAP")
    return ReplicationConfig(
        committer=optional_env_var("TWOREP_COMMITTER") or DEFAULT_COMMITTER,
        rep_prefix=optional_env_var("TWOREP_REP_PREFIX") or DEFAULT_REP_PREFIX,
        rep_details_size=optional_positive_int("TWOREP_REP_DETAILS_SIZE", REP_DETAILS_SIZE),
        diff_dump_size=optional_positive_int("TWOREP_DIFF_DUMP_SIZE", DIFF_DUMP_SIZE),
        commit_frequency=optional_positive_int(
            "TWOREP_COMMIT_FREQUENCY", DEFAULT_COMMIT_FREQUENCY
        ),
        table_map=parse_table_map(raw_map) if raw_map else {},
    )
