# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Node lifecycle state machine.

PENDING -> LAUNCHING -> CONNECTED -> [WAITING_FOR_OPERATOR] -> RUNNING
-> COLLECTING -> [WAITING_FOR_OPERATOR] -> [TERMINATING] -> DONE, with an
error edge to FAILED from every non-terminal state. Cloud nodes pass through
TERMINATING on the error path too. A node waiting for the operator resumes
only into the phase that follows the one it paused in.
"""

import logging

from nodebench.common.enums import NodeState

logger = logging.getLogger(__name__)

__all__ = ["InvalidTransitionError", "NodeStateMachine", "RESUME_TARGETS", "TRANSITIONS"]

TRANSITIONS: dict[NodeState, frozenset[NodeState]] = {
    NodeState.PENDING: frozenset({NodeState.LAUNCHING}),
    NodeState.LAUNCHING: frozenset({NodeState.CONNECTED, NodeState.TERMINATING}),
    NodeState.CONNECTED: frozenset(
        {NodeState.WAITING_FOR_OPERATOR, NodeState.RUNNING, NodeState.TERMINATING}
    ),
    NodeState.RUNNING: frozenset({NodeState.COLLECTING, NodeState.TERMINATING}),
    NodeState.COLLECTING: frozenset(
        {NodeState.WAITING_FOR_OPERATOR, NodeState.TERMINATING, NodeState.DONE}
    ),
    NodeState.TERMINATING: frozenset({NodeState.DONE}),
    NodeState.DONE: frozenset(),
    NodeState.FAILED: frozenset(),
}

# a paused node resumes into the phase that follows the one it paused in
RESUME_TARGETS: dict[NodeState, frozenset[NodeState]] = {
    NodeState.CONNECTED: frozenset({NodeState.RUNNING, NodeState.TERMINATING}),
    NodeState.COLLECTING: frozenset({NodeState.TERMINATING, NodeState.DONE}),
}


class InvalidTransitionError(RuntimeError):
    """A transition not allowed from the current state was requested."""


class NodeStateMachine:
    """Tracks the state of one node and the path it took."""

    def __init__(self, label: str) -> None:
        self.label = label
        self.state = NodeState.PENDING
        self.history: list[NodeState] = [NodeState.PENDING]
        self.paused_from: NodeState | None = None

    def can_transition(self, target: NodeState) -> bool:
        if target == NodeState.FAILED:
            return not self.state.is_terminal
        if self.state == NodeState.WAITING_FOR_OPERATOR:
            return target in RESUME_TARGETS[self.paused_from]
        return target in TRANSITIONS[self.state]

    def transition(self, target: NodeState, reason: str | None = None) -> None:
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"{self.label}: illegal transition {self.state.value} -> {target.value}"
            )
        suffix = f" ({reason})" if reason else ""
        logger.debug(f"{self.label}: {self.state.value} -> {target.value}{suffix}")
        if target == NodeState.WAITING_FOR_OPERATOR:
            self.paused_from = self.state
        self.state = target
        self.history.append(target)

    def fail(self, reason: str | None = None) -> None:
        """Move to FAILED unless already terminal."""
        if not self.state.is_terminal:
            self.transition(NodeState.FAILED, reason)
