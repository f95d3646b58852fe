# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""In-memory stand-ins for a remote session and a provider adapter."""

from nodebench.common.exceptions import RemoteTransportError
from nodebench.providers.base import ProviderAdapter
from nodebench.remote.session import CommandOutput, RemoteSession


class FakeRemoteFile:
    """Remote file backed by the owning FakeSession's ``files`` dict."""

    def __init__(self, session: "FakeSession", path: str, data: bytes | None = None) -> None:
        self._session = session
        self.path = path
        self._reading = data is not None
        self._buffer = bytearray(data or b"")
        self._offset = 0
        self.closed = False

    async def read(self, size: int = -1) -> bytes:
        if self._session.fail_mid_read.get(self.path, 0) > 0 and self._offset > 0:
            self._session.fail_mid_read[self.path] -= 1
            raise RemoteTransportError(f"connection reset reading {self.path}")
        end = len(self._buffer) if size < 0 else self._offset + size
        chunk = bytes(self._buffer[self._offset : end])
        self._offset += len(chunk)
        return chunk

    async def write(self, data: bytes) -> None:
        self._buffer.extend(data)

    async def close(self) -> None:
        if not self.closed and not self._reading:
            self._session.files[self.path] = bytes(self._buffer)
        self.closed = True


class FakeSession:
    """In-memory RemoteSession.

    Attributes:
        files: Remote file system, path -> content
        shell_statuses: Exit statuses returned by successive shell() calls; 0 once exhausted
        shell_calls: Every command line passed to shell()
        command_calls: Every (program, args) passed to command()
        command_output: What command() returns
        read_errors: path -> number of read_from() calls that raise RemoteTransportError
    """

    def __init__(
        self,
        files: dict[str, bytes] | None = None,
        shell_statuses: list[int] | None = None,
        command_output: CommandOutput | None = None,
    ) -> None:
        self.files: dict[str, bytes] = dict(files or {})
        self.shell_statuses = list(shell_statuses or [])
        self.shell_calls: list[str] = []
        self.command_calls: list[tuple[str, list[str]]] = []
        self.command_output = command_output or CommandOutput(status=0)
        self.command_error: Exception | None = None
        self.read_errors: dict[str, int] = {}
        self.fail_mid_read: dict[str, int] = {}
        self.read_calls: list[str] = []
        self.closed = False

    async def shell(self, command: str) -> int:
        self.shell_calls.append(command)
        return self.shell_statuses.pop(0) if self.shell_statuses else 0

    async def command(self, program: str, args: list[str]) -> CommandOutput:
        self.command_calls.append((program, list(args)))
        if self.command_error is not None:
            raise self.command_error
        return self.command_output

    async def write_to(self, path: str) -> FakeRemoteFile:
        return FakeRemoteFile(self, path)

    async def read_from(self, path: str) -> FakeRemoteFile:
        self.read_calls.append(path)
        if self.read_errors.get(path, 0) > 0:
            self.read_errors[path] -= 1
            raise RemoteTransportError(f"channel closed opening {path}")
        if path not in self.files:
            raise FileNotFoundError(path)
        return FakeRemoteFile(self, path, self.files[path])

    async def close(self) -> None:
        self.closed = True


class FakeAdapter(ProviderAdapter):
    """ProviderAdapter whose provisioning and teardown are scripted by the test."""

    def __init__(
        self,
        tag: str = "aws",
        owns_resources: bool = True,
        session: FakeSession | None = None,
        provision_error: BaseException | None = None,
        validate_error: Exception | None = None,
        terminate_error: Exception | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self._tag = tag
        self._owns = owns_resources
        self.session = session or FakeSession()
        self.provision_error = provision_error
        self.validate_error = validate_error
        self.terminate_error = terminate_error
        self.validate_calls = 0
        self.provision_calls = 0
        self.terminate_calls = 0

    @property
    def provider_tag(self) -> str:
        return self._tag

    @property
    def owns_resources(self) -> bool:
        return self._owns

    async def validate(self) -> None:
        self.validate_calls += 1
        if self.validate_error is not None:
            raise self.validate_error

    async def _provision(self, machine_name: str) -> RemoteSession:
        self.provision_calls += 1
        if self.provision_error is not None:
            raise self.provision_error
        return self.session

    async def terminate_all(self) -> None:
        self.terminate_calls += 1
        await self.disconnect_all()
        if self.terminate_error is not None:
            raise self.terminate_error


