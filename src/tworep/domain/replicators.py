"""Replicators applying detected differences through the replication helper."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from tworep.domain.model import Arm, ChangeType

if TYPE_CHECKING:
    from tworep.domain.model import Difference
    from tworep.domain.replication_helper import ReplicationHelper

log = logging.getLogger(__name__)

OUTCOME_REPLICATED = "replicated"
OUTCOME_IGNORED = "ignored"


class Replicator(Protocol):
    """Applies one difference at a time; errors propagate to the run."""

    def replicate_difference(self, diff: Difference) -> None: ...


class OneWayReplicator:
    """Propagate the changes of ``source`` to its counterpart arm.

    Changes detected on the other arm are ignored (and logged as such), which makes the
    source arm win every conflict.
    """

    def __init__(self, helper: ReplicationHelper, *, source: Arm = Arm.LEFT) -> None:
        self.helper = helper
        self.source = Arm(source)
        self.target = self.source.counterpart

    def replicate_difference(self, diff: Difference) -> None:
        change = diff.change(self.source)
        if change is None:
            self.helper.log_replication_outcome(
                diff, OUTCOME_IGNORED, f"no change on the {self.source} arm"
            )
            return

        target_table = self.helper.corresponding_table(self.source, change.table)

        if change.type is ChangeType.DELETE:
            self.helper.delete_record(self.target, target_table, dict(change.key))
            self.helper.log_replication_outcome(diff, OUTCOME_REPLICATED)
            return

        record = self.helper.load_record(self.source, change.table, change.current_key)
        if record is None:
            log.info(
                "Source record %r of %s vanished; skipping",
                dict(change.current_key),
                change.table,
            )
            self.helper.log_replication_outcome(
                diff, OUTCOME_IGNORED, f"{self.source} record no longer exists"
            )
            return

        if change.type is ChangeType.INSERT:
            self.helper.insert_record(self.target, target_table, record)
        else:
            self.helper.update_record(self.target, target_table, record, change.key)
        self.helper.log_replication_outcome(diff, OUTCOME_REPLICATED)
