# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Operator checkpoints: points where a run pauses so the node can be inspected."""

import asyncio
import logging
import sys
from typing import Protocol, TextIO, runtime_checkable

from rich.console import Console

logger = logging.getLogger(__name__)

__all__ = ["AutoContinueCheckpoint", "OperatorCheckpoint", "StdinCheckpoint"]


@runtime_checkable
class OperatorCheckpoint(Protocol):
    async def wait(self, reason: str) -> None: ...


class StdinCheckpoint:
    """Blocks until the operator presses enter. End of input also continues."""

    def __init__(self, stream: TextIO | None = None, console: Console | None = None) -> None:
        self.stream = stream or sys.stdin
        self.console = console or Console(stderr=True)

    async def wait(self, reason: str) -> None:
        self.console.print(
            f"[bold yellow]pausing for manual instance inspection ({reason}), "
            f"press enter to continue[/bold yellow]"
        )
        line = await asyncio.to_thread(self.stream.readline)
        if not line:
            logger.debug("stdin closed, continuing")


class AutoContinueCheckpoint:
    """Checkpoint that never blocks; records the reasons it was reached."""

    def __init__(self) -> None:
        self.reasons: list[str] = []

    async def wait(self, reason: str) -> None:
        logger.debug(f"checkpoint reached ({reason}), continuing")
        self.reasons.append(reason)
