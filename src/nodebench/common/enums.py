# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from enum import Enum


class ProviderKind(str, Enum):
    """Backends a node descriptor can select. Values match the config file tags."""

    AWS = "Aws"
    AZURE = "Azure"
    BAREMETAL = "Baremetal"


class NodeState(str, Enum):
    """Lifecycle states of a single node run."""

    PENDING = "pending"
    LAUNCHING = "launching"
    CONNECTED = "connected"
    WAITING_FOR_OPERATOR = "waiting_for_operator"
    RUNNING = "running"
    COLLECTING = "collecting"
    TERMINATING = "terminating"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (NodeState.DONE, NodeState.FAILED)


class LaunchMode(str, Enum):
    """How EC2 capacity is requested."""

    ON_DEMAND = "on_demand"
    SPOT = "spot"
    TRY_SPOT = "try_spot"
