# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Policies deciding whether a batch goes on after a node result."""

import logging
from abc import ABC, abstractmethod

from nodebench.orchestrator.models import NodeRunResult

logger = logging.getLogger(__name__)

__all__ = [
    "BatchPolicy",
    "ContinueOnErrorPolicy",
    "FailFastPolicy",
    "policy_for",
]


class BatchPolicy(ABC):
    """Base class for batch policies.

    Nodes always run one after another; a policy only decides whether the
    next node runs at all given the results so far.
    """

    @abstractmethod
    def should_continue(self, results: list[NodeRunResult], remaining: int) -> bool:
        """Decide whether to process the next node.

        Args:
            results: Results of the nodes processed so far
            remaining: Number of nodes not yet processed

        Returns:
            True to process the next node, False to stop the batch
        """
        pass


class FailFastPolicy(BatchPolicy):
    """Stop at the first failed node."""

    def should_continue(self, results: list[NodeRunResult], remaining: int) -> bool:
        if remaining <= 0:
            return False
        if results and not results[-1].success:
            logger.error(
                f"{results[-1].label} failed; skipping {remaining} remaining node(s) "
                f"(use --continue-on-error to keep going)"
            )
            return False
        return True


class ContinueOnErrorPolicy(BatchPolicy):
    """Process every node regardless of earlier failures."""

    def should_continue(self, results: list[NodeRunResult], remaining: int) -> bool:
        return remaining > 0


def policy_for(continue_on_error: bool) -> BatchPolicy:
    return ContinueOnErrorPolicy() if continue_on_error else FailFastPolicy()
