# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import pytest

from nodebench.common.enums import NodeState
from nodebench.orchestrator.state import InvalidTransitionError, NodeStateMachine


class TestNodeStateMachine:
    def test_starts_pending(self):
        machine = NodeStateMachine("node")

        assert machine.state == NodeState.PENDING
        assert machine.history == [NodeState.PENDING]

    def test_cloud_happy_path(self):
        machine = NodeStateMachine("node")
        path = [
            NodeState.LAUNCHING,
            NodeState.CONNECTED,
            NodeState.RUNNING,
            NodeState.COLLECTING,
            NodeState.TERMINATING,
            NodeState.DONE,
        ]

        for state in path:
            machine.transition(state)

        assert machine.history == [NodeState.PENDING, *path]

    def test_static_host_skips_terminating(self):
        machine = NodeStateMachine("node")
        for state in (
            NodeState.LAUNCHING,
            NodeState.CONNECTED,
            NodeState.RUNNING,
            NodeState.COLLECTING,
        ):
            machine.transition(state)

        machine.transition(NodeState.DONE)

        assert machine.state == NodeState.DONE

    def test_operator_waits(self):
        machine = NodeStateMachine("node")
        for state in (
            NodeState.LAUNCHING,
            NodeState.CONNECTED,
            NodeState.WAITING_FOR_OPERATOR,
            NodeState.RUNNING,
            NodeState.COLLECTING,
            NodeState.WAITING_FOR_OPERATOR,
            NodeState.TERMINATING,
            NodeState.DONE,
        ):
            machine.transition(state)

        assert machine.history.count(NodeState.WAITING_FOR_OPERATOR) == 2

    @pytest.mark.parametrize(
        "path",
        [
            [NodeState.RUNNING],
            [NodeState.LAUNCHING, NodeState.RUNNING],
            [NodeState.LAUNCHING, NodeState.CONNECTED, NodeState.COLLECTING],
            [NodeState.LAUNCHING, NodeState.DONE],
        ],
    )
    def test_illegal_transitions_rejected(self, path):
        machine = NodeStateMachine("node")
        *legal, illegal = path
        for state in legal:
            machine.transition(state)

        with pytest.raises(InvalidTransitionError, match="illegal transition"):
            machine.transition(illegal)

    def test_fail_from_any_non_terminal_state(self):
        machine = NodeStateMachine("node")
        machine.transition(NodeState.LAUNCHING)
        machine.transition(NodeState.TERMINATING)

        machine.fail("terminate failed")

        assert machine.state == NodeState.FAILED

    def test_terminal_states_are_final(self):
        machine = NodeStateMachine("node")
        machine.fail("validation")

        machine.fail("again")
        assert machine.history == [NodeState.PENDING, NodeState.FAILED]
        with pytest.raises(InvalidTransitionError):
            machine.transition(NodeState.LAUNCHING)


class TestOperatorResume:
    """A paused node resumes only into the phase after the one it paused in."""

    def _paused_after_connect(self) -> NodeStateMachine:
        machine = NodeStateMachine("node")
        for state in (NodeState.LAUNCHING, NodeState.CONNECTED, NodeState.WAITING_FOR_OPERATOR):
            machine.transition(state)
        return machine

    def _paused_after_collect(self) -> NodeStateMachine:
        machine = NodeStateMachine("node")
        for state in (
            NodeState.LAUNCHING,
            NodeState.CONNECTED,
            NodeState.RUNNING,
            NodeState.COLLECTING,
            NodeState.WAITING_FOR_OPERATOR,
        ):
            machine.transition(state)
        return machine

    def test_records_phase_paused_in(self):
        assert self._paused_after_connect().paused_from == NodeState.CONNECTED
        assert self._paused_after_collect().paused_from == NodeState.COLLECTING

    def test_pause_after_connect_cannot_finish(self):
        machine = self._paused_after_connect()

        with pytest.raises(InvalidTransitionError, match="waiting_for_operator -> done"):
            machine.transition(NodeState.DONE)

    def test_pause_after_collect_cannot_run_again(self):
        machine = self._paused_after_collect()

        with pytest.raises(InvalidTransitionError, match="illegal transition"):
            machine.transition(NodeState.RUNNING)

    @pytest.mark.parametrize("target", [NodeState.RUNNING, NodeState.TERMINATING])
    def test_pause_after_connect_resumes(self, target):
        machine = self._paused_after_connect()

        machine.transition(target)

        assert machine.state == target

    @pytest.mark.parametrize("target", [NodeState.TERMINATING, NodeState.DONE])
    def test_pause_after_collect_resumes(self, target):
        machine = self._paused_after_collect()

        machine.transition(target)

        assert machine.state == target

    def test_paused_node_can_fail(self):
        machine = self._paused_after_collect()

        machine.fail("operator aborted")

        assert machine.state == NodeState.FAILED
