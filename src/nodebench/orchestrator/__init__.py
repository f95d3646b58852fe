# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Node lifecycle orchestration."""

from nodebench.orchestrator.checkpoint import (
    AutoContinueCheckpoint,
    OperatorCheckpoint,
    StdinCheckpoint,
)
from nodebench.orchestrator.collector import ExperimentGrid, ResultMatrixCollector
from nodebench.orchestrator.installer import (
    DEFAULT_INSTALL_STEPS,
    InstallStep,
    RetryingInstaller,
)
from nodebench.orchestrator.models import (
    CollectedSummary,
    ExperimentOutcome,
    NodeRunResult,
)
from nodebench.orchestrator.orchestrator import (
    MACHINE_NAME,
    BatchOrchestrator,
    NodeOrchestrator,
)
from nodebench.orchestrator.policies import (
    BatchPolicy,
    ContinueOnErrorPolicy,
    FailFastPolicy,
    policy_for,
)
from nodebench.orchestrator.runner import ExperimentRunner
from nodebench.orchestrator.setup import NodeSetup
from nodebench.orchestrator.state import (
    RESUME_TARGETS,
    TRANSITIONS,
    InvalidTransitionError,
    NodeStateMachine,
)

__all__ = [
    "AutoContinueCheckpoint",
    "BatchOrchestrator",
    "BatchPolicy",
    "CollectedSummary",
    "ContinueOnErrorPolicy",
    "DEFAULT_INSTALL_STEPS",
    "ExperimentGrid",
    "ExperimentOutcome",
    "ExperimentRunner",
    "FailFastPolicy",
    "InstallStep",
    "InvalidTransitionError",
    "MACHINE_NAME",
    "NodeOrchestrator",
    "NodeRunResult",
    "NodeSetup",
    "NodeStateMachine",
    "OperatorCheckpoint",
    "RESUME_TARGETS",
    "ResultMatrixCollector",
    "RetryingInstaller",
    "StdinCheckpoint",
    "TRANSITIONS",
    "policy_for",
]
