# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for node orchestration."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from nodebench.common.enums import NodeState


class CollectedSummary(BaseModel):
    """Outcome of fetching the result matrix from one node.

    Attributes:
        considered: Number of candidate file names enumerated
        fetched: Number of files copied to the local machine
        missing: Names that do not exist remotely (variant not run)
        failed: Names whose fetch failed with a transport error after retries
    """

    considered: int = Field(ge=0)
    fetched: int = Field(default=0, ge=0)
    missing: list[str] = Field(default_factory=list)
    failed: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _fetched_within_considered(self) -> "CollectedSummary":
        if self.fetched + len(self.missing) + len(self.failed) > self.considered:
            raise ValueError(
                f"accounted for more files ({self.fetched} fetched, {len(self.missing)} missing, "
                f"{len(self.failed)} failed) than considered ({self.considered})"
            )
        return self


class ExperimentOutcome(BaseModel):
    """Result of running the experiment driver on a node.

    Attributes:
        exit_status: Exit status of the remote driver
        log_path: Local file holding the driver's stdout
    """

    exit_status: int
    log_path: Path

    @property
    def success(self) -> bool:
        return self.exit_status == 0


class NodeRunResult(BaseModel):
    """Result of processing one node descriptor.

    Attributes:
        label: Human-readable label for the node (e.g., "node_0001-aws")
        descriptor: Description of the node descriptor
        provider_tag: Tag used for this node's artifacts
        success: Whether the node reached DONE
        state: Final state of the node's state machine
        history: Every state the node went through, in order
        experiment: Outcome of the experiment driver, if it ran
        summary: Result collection counts, if collection ran
        error: Error message if the node failed
        termination_failed: Whether releasing cloud resources failed
    """

    label: str
    descriptor: str
    provider_tag: str
    success: bool
    state: NodeState
    history: list[NodeState] = Field(default_factory=list)
    experiment: ExperimentOutcome | None = None
    summary: CollectedSummary | None = None
    error: str | None = None
    termination_failed: bool = False
