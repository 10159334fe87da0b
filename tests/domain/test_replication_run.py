from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from tests.helpers.arms import fake_arm, make_fake_session
from tests.helpers.differences import make_difference
from tworep.config import ReplicationConfig
from tworep.domain.errors import RunAlreadyStartedError
from tworep.domain.model import Arm, ChangeType
from tworep.domain.replication_run import ReplicationRun

if TYPE_CHECKING:
    from tworep.domain.model import Difference
    from tworep.domain.replication_helper import ReplicationHelper


class _RecordingReplicator:
    def __init__(self, helper: ReplicationHelper, *, fail_on: int | None = None) -> None:
        self.helper = helper
        self.fail_on = fail_on
        self.seen: list[Difference] = []

    def replicate_difference(self, diff: Difference) -> None:
        if self.fail_on is not None and len(self.seen) == self.fail_on:
            raise RuntimeError("replication failed")
        self.seen.append(diff)


def _differences(count: int) -> list[Difference]:
    return [
        make_difference(left=("orders", {"id": index}, ChangeType.INSERT))
        for index in range(count)
    ]


def test_run_replicates_all_and_commits_once() -> None:
    session = make_fake_session(ReplicationConfig(committer="deferred"))
    replicators: list[_RecordingReplicator] = []

    def factory(helper: ReplicationHelper) -> _RecordingReplicator:
        replicators.append(_RecordingReplicator(helper))
        return replicators[-1]

    result = ReplicationRun(session).run(_differences(3), factory)

    assert result.replicated == 3
    assert result.committer == "deferred"
    assert len(replicators[0].seen) == 3
    for arm in Arm:
        assert fake_arm(session, arm).event_names() == ["begin", "commit"]


def test_run_finalizes_unsuccessfully_and_reraises() -> None:
    session = make_fake_session(ReplicationConfig(committer="deferred"))

    with pytest.raises(RuntimeError, match="replication failed"):
        ReplicationRun(session).run(
            _differences(3), lambda helper: _RecordingReplicator(helper, fail_on=1)
        )

    for arm in Arm:
        assert fake_arm(session, arm).event_names() == ["begin", "rollback"]


def test_run_rolls_back_when_replicator_cannot_be_built() -> None:
    session = make_fake_session(ReplicationConfig(committer="deferred"))

    def factory(helper: ReplicationHelper) -> _RecordingReplicator:
        raise RuntimeError(f"no replicator for {helper.config.committer}")

    with pytest.raises(RuntimeError, match="no replicator for deferred"):
        ReplicationRun(session).run(_differences(1), factory)

    for arm in Arm:
        assert fake_arm(session, arm).event_names() == ["begin", "rollback"]


def test_run_can_only_execute_once() -> None:
    run = ReplicationRun(make_fake_session())
    run.run([], _RecordingReplicator)

    with pytest.raises(RunAlreadyStartedError):
        run.run([], _RecordingReplicator)
