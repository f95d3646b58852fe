# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared configuration, errors, enums and logging helpers."""

from nodebench.common.config import (
    AwsNode,
    AzureNode,
    BaremetalNode,
    NodeDescriptor,
    RunConfig,
    RunOptions,
    load_node_descriptors,
    parse_node_descriptors,
)
from nodebench.common.enums import LaunchMode, NodeState, ProviderKind
from nodebench.common.environment import Environment
from nodebench.common.exceptions import (
    ConfigurationError,
    InstallError,
    LaunchError,
    LaunchTimeoutError,
    NodeBenchError,
    PreflightError,
    ProviderAPIError,
    RemoteTransportError,
    RunError,
    SetupError,
    TerminateError,
)
from nodebench.common.mixins import NodeBenchLoggerMixin

__all__ = [
    "AwsNode",
    "AzureNode",
    "BaremetalNode",
    "ConfigurationError",
    "Environment",
    "InstallError",
    "LaunchError",
    "LaunchMode",
    "LaunchTimeoutError",
    "NodeBenchError",
    "NodeBenchLoggerMixin",
    "NodeDescriptor",
    "NodeState",
    "PreflightError",
    "ProviderAPIError",
    "ProviderKind",
    "RemoteTransportError",
    "RunConfig",
    "RunError",
    "RunOptions",
    "SetupError",
    "TerminateError",
    "load_node_descriptors",
    "parse_node_descriptors",
]
