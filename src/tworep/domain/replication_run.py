"""Execution of one replication run over a batch of differences."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeAlias

from tworep.domain.errors import RunAlreadyStartedError
from tworep.domain.replication_helper import ReplicationHelper

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from tworep.config import ReplicationConfig
    from tworep.domain.model import Difference
    from tworep.domain.ports import ReplicationSession
    from tworep.domain.replicators import Replicator

ReplicatorFactory: TypeAlias = "Callable[[ReplicationHelper], Replicator]"

log = logging.getLogger(__name__)


@dataclass(slots=True)
class ReplicationRunResult:
    """Summary of a finished replication run."""

    replicated: int
    committer: str


class ReplicationRun:
    """Owns the session and the single replication helper of one run.

    The helper (and with it the committer) is created when the run starts. The run
    finalizes the helper exactly once: successfully after the last difference, or
    unsuccessfully as soon as a replicator raises, in which case the error is re-raised.
    """

    def __init__(
        self, session: ReplicationSession, *, config: ReplicationConfig | None = None
    ) -> None:
        self.session = session
        self.config = config or session.config
        self.helper: ReplicationHelper | None = None

    def run(
        self,
        differences: Iterable[Difference],
        replicator_factory: ReplicatorFactory,
    ) -> ReplicationRunResult:
        if self.helper is not None:
            raise RunAlreadyStartedError("A replication run can only be executed once")

        helper = ReplicationHelper(self.session, config=self.config)
        self.helper = helper
        replicated = 0
        try:
            replicator = replicator_factory(helper)
            for diff in differences:
                replicator.replicate_difference(diff)
                replicated += 1
        except Exception:
            log.exception("Replication failed after %d difference(s); rolling back", replicated)
            helper.finalize(success=False)
            raise

        helper.finalize(success=True)
        log.info(
            "Finished replication run: replicated=%s, committer=%s",
            replicated,
            self.config.committer,
        )
        return ReplicationRunResult(replicated=replicated, committer=self.config.committer)
