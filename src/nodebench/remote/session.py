# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Contract of an authenticated remote session.

Providers hand these out; the orchestrator, installer, runner and collector
only ever talk to a node through it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True, slots=True)
class CommandOutput:
    """Exit status and captured streams of a finished remote command."""

    status: int
    stdout: bytes = b""
    stderr: bytes = b""

    @property
    def success(self) -> bool:
        return self.status == 0


@runtime_checkable
class RemoteFile(Protocol):
    """An open remote file. Must be closed to flush and release it."""

    async def read(self, size: int = -1) -> bytes: ...

    async def write(self, data: bytes) -> None: ...

    async def close(self) -> None: ...


@runtime_checkable
class RemoteSession(Protocol):
    """Shell execution and file transfer on one remote host."""

    async def shell(self, command: str) -> int:
        """Run a command line through the remote shell and return its exit status."""
        ...

    async def command(self, program: str, args: list[str]) -> CommandOutput:
        """Run a program with arguments, capturing stdout and stderr."""
        ...

    async def write_to(self, path: str) -> RemoteFile:
        """Open a remote file for writing, truncating it."""
        ...

    async def read_from(self, path: str) -> RemoteFile:
        """Open a remote file for reading.

        Raises:
            FileNotFoundError: The file does not exist.
            RemoteTransportError: Any other failure.
        """
        ...

    async def close(self) -> None: ...
