# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Result matrix enumeration and retrieval.

The experiment driver writes one file per parameter combination it ran. The
collector recomputes every name the driver could have produced and fetches
those that exist; a missing file only means that variant was not run.
"""

import asyncio
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from nodebench.common.environment import Environment
from nodebench.common.exceptions import RemoteTransportError
from nodebench.common.mixins import NodeBenchLoggerMixin
from nodebench.orchestrator.models import CollectedSummary
from nodebench.remote.session import RemoteSession
from nodebench.remote.transfer import fetch_file

__all__ = ["ExperimentGrid", "ResultMatrixCollector"]


class ExperimentGrid(BaseModel):
    """Parameter axes of the benchmark sweep, used only to derive file names.

    Attributes:
        inter_request_ms: Spacing between requests, in milliseconds
        batch_sizes: Requests per batch
        batch_types: Batching strategy ("loop" or "opt")
        receivers: Number of receivers
        groups: Ordering group counts, ordered family only
        impls: Implementation kind ("client" or "service")
    """

    model_config = ConfigDict(frozen=True)

    inter_request_ms: tuple[int, ...] = (75,)
    batch_sizes: tuple[int, ...] = (1, 5, 10)
    batch_types: tuple[str, ...] = ("loop", "opt")
    receivers: tuple[int, ...] = (1, 2, 5, 10)
    groups: tuple[int, ...] = Field(default=(0, 1, 2, 5, 10))
    impls: tuple[str, ...] = ("client", "service")

    @staticmethod
    def best_effort_name(
        provider: str, inter: int, rcvrs: int, batch: int, batch_type: str, impl: str
    ) -> str:
        return f"exp-{provider}-be-{inter}ms-{rcvrs}rcvrs-{batch}batch-{batch_type}-{impl}.data"

    @staticmethod
    def ordered_name(
        provider: str, groups: int, inter: int, rcvrs: int, batch: int, batch_type: str, impl: str
    ) -> str:
        return (
            f"exp-{provider}-ord:{groups}g-{inter}ms-{rcvrs}rcvrs-{batch}batch-{batch_type}-{impl}.data"
        )

    def filenames(self, provider_tag: str) -> list[str]:
        """Every candidate result file name for ``provider_tag``, in a fixed order."""
        names = []
        for inter in self.inter_request_ms:
            for batch in self.batch_sizes:
                for batch_type in self.batch_types:
                    for rcvrs in self.receivers:
                        for impl in self.impls:
                            names.append(
                                self.best_effort_name(
                                    provider_tag, inter, rcvrs, batch, batch_type, impl
                                )
                            )
                        for grps in self.groups:
                            for impl in self.impls:
                                names.append(
                                    self.ordered_name(
                                        provider_tag, grps, inter, rcvrs, batch, batch_type, impl
                                    )
                                )
        return names


class ResultMatrixCollector(NodeBenchLoggerMixin):
    """Fetches every result file of the grid that exists on the node."""

    def __init__(
        self,
        output_dir: Path = Path("."),
        grid: ExperimentGrid | None = None,
        fetch_retries: int | None = None,
        fetch_retry_delay: float | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.output_dir = Path(output_dir)
        self.grid = grid or ExperimentGrid()
        self.fetch_retries = (
            Environment.COLLECT.FETCH_RETRIES if fetch_retries is None else fetch_retries
        )
        self.fetch_retry_delay = (
            Environment.COLLECT.FETCH_RETRY_DELAY if fetch_retry_delay is None else fetch_retry_delay
        )

    async def collect(self, session: RemoteSession, provider_tag: str) -> CollectedSummary:
        """Fetch the result matrix. Never raises for a missing or unreadable remote file."""
        names = self.grid.filenames(provider_tag)
        await asyncio.to_thread(self.output_dir.mkdir, parents=True, exist_ok=True)

        fetched = 0
        missing: list[str] = []
        failed: list[str] = []
        for name in names:
            outcome = await self._fetch_one(session, name)
            if outcome is True:
                fetched += 1
            elif outcome is False:
                missing.append(name)
            else:
                failed.append(name)

        summary = CollectedSummary(
            considered=len(names), fetched=fetched, missing=missing, failed=failed
        )
        self.info(
            f"done getting files: considered={summary.considered} fetched={summary.fetched} "
            f"missing={len(summary.missing)} failed={len(summary.failed)}"
        )
        return summary

    async def _fetch_one(self, session: RemoteSession, name: str) -> bool | None:
        """True if fetched, False if absent, None if it kept failing."""
        local_path = self.output_dir / name
        for attempt in range(1, self.fetch_retries + 2):
            try:
                await fetch_file(session, name, local_path)
                self.trace(f"fetched {name}")
                return True
            except FileNotFoundError:
                # the experiment variant was not run this time
                self.warning(f"file error: {name} not found")
                return False
            except RemoteTransportError as e:
                await asyncio.to_thread(local_path.unlink, missing_ok=True)
                if attempt > self.fetch_retries:
                    self.error(f"giving up on {name} after {attempt} attempts: {e}")
                    return None
                self.warning(f"fetching {name} failed (attempt {attempt}): {e}")
                await asyncio.sleep(self.fetch_retry_delay)
        return None
