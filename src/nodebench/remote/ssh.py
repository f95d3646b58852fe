# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""RemoteSession implementation on top of paramiko.

paramiko is blocking; every call that touches the network is pushed to a
worker thread with ``asyncio.to_thread`` so the event loop stays free.
"""

from __future__ import annotations

import asyncio
import shlex
import time
from pathlib import Path

import paramiko

from nodebench.common.environment import Environment
from nodebench.common.exceptions import (
    LaunchError,
    LaunchTimeoutError,
    RemoteTransportError,
)
from nodebench.common.mixins import NodeBenchLoggerMixin
from nodebench.remote.session import CommandOutput

__all__ = ["SFTPRemoteFile", "SSHSession", "wait_for_ssh"]

_TRANSPORT_ERRORS = (paramiko.SSHException, OSError, EOFError)


class SFTPRemoteFile:
    """Async wrapper over a paramiko SFTPFile."""

    def __init__(self, handle: paramiko.SFTPFile, path: str) -> None:
        self._handle = handle
        self.path = path
        self._closed = False

    async def read(self, size: int = -1) -> bytes:
        try:
            return await asyncio.to_thread(self._handle.read, None if size < 0 else size)
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"read {self.path}: {e}") from e

    async def write(self, data: bytes) -> None:
        try:
            await asyncio.to_thread(self._handle.write, data)
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"write {self.path}: {e}") from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await asyncio.to_thread(self._handle.close)
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"close {self.path}: {e}") from e


class SSHSession(NodeBenchLoggerMixin):
    """A connected SSH client plus a lazily opened SFTP channel."""

    def __init__(self, client: paramiko.SSHClient, host: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client = client
        self._sftp: paramiko.SFTPClient | None = None
        self.host = host

    def __repr__(self) -> str:
        return f"SSHSession(host={self.host!r})"

    @classmethod
    async def connect(
        cls,
        host: str,
        user: str,
        port: int | None = None,
        pkey: paramiko.PKey | None = None,
        key_filename: Path | None = None,
        timeout: float | None = None,
    ) -> SSHSession:
        """Open an SSH connection. Unknown host keys are accepted."""
        port = port or Environment.SSH.PORT
        timeout = timeout or Environment.SSH.CONNECT_TIMEOUT
        key_filename = key_filename or Environment.SSH.KEY_FILENAME

        client = paramiko.SSHClient()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            await asyncio.to_thread(
                client.connect,
                host,
                port=port,
                username=user,
                pkey=pkey,
                key_filename=str(key_filename) if key_filename else None,
                timeout=timeout,
                banner_timeout=timeout,
                auth_timeout=timeout,
            )
        except BaseException:
            client.close()
            raise
        return cls(client, host)

    async def shell(self, command: str) -> int:
        self.debug(f"[{self.host}] $ {command}")
        output = await self._exec(command)
        return output.status

    async def command(self, program: str, args: list[str]) -> CommandOutput:
        line = shlex.join([program, *args])
        self.debug(f"[{self.host}] running {line}")
        return await self._exec(line)

    async def _exec(self, line: str) -> CommandOutput:
        try:
            _, stdout, stderr = await asyncio.to_thread(self._client.exec_command, line)
            # stdout and stderr share the channel window; drain them together
            out, err = await asyncio.gather(
                asyncio.to_thread(stdout.read), asyncio.to_thread(stderr.read)
            )
            status = await asyncio.to_thread(stdout.channel.recv_exit_status)
            return CommandOutput(status=status, stdout=out, stderr=err)
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"[{self.host}] exec '{line}': {e}") from e

    async def _get_sftp(self) -> paramiko.SFTPClient:
        if self._sftp is None:
            try:
                self._sftp = await asyncio.to_thread(self._client.open_sftp)
            except _TRANSPORT_ERRORS as e:
                raise RemoteTransportError(f"[{self.host}] open sftp: {e}") from e
        return self._sftp

    async def write_to(self, path: str) -> SFTPRemoteFile:
        sftp = await self._get_sftp()
        try:
            handle = await asyncio.to_thread(sftp.open, str(path), "wb")
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"[{self.host}] open {path} for writing: {e}") from e
        # pipelined writes; errors surface on close
        handle.set_pipelined(True)
        return SFTPRemoteFile(handle, str(path))

    async def read_from(self, path: str) -> SFTPRemoteFile:
        sftp = await self._get_sftp()
        try:
            handle = await asyncio.to_thread(sftp.open, str(path), "rb")
        except FileNotFoundError:
            raise
        except _TRANSPORT_ERRORS as e:
            raise RemoteTransportError(f"[{self.host}] open {path} for reading: {e}") from e
        return SFTPRemoteFile(handle, str(path))

    async def close(self) -> None:
        if self._sftp is not None:
            await asyncio.to_thread(self._sftp.close)
            self._sftp = None
        await asyncio.to_thread(self._client.close)


async def wait_for_ssh(
    host: str,
    user: str,
    timeout: float | None,
    pkey: paramiko.PKey | None = None,
    key_filename: Path | None = None,
    port: int | None = None,
) -> SSHSession:
    """Connect to a freshly booted VM, retrying until sshd answers.

    Raises:
        LaunchError: If the host rejected the credentials or its host key.
        LaunchTimeoutError: If no connection succeeded before ``timeout`` seconds.
    """
    deadline = None if timeout is None else time.monotonic() + timeout
    attempt = 0
    while True:
        attempt += 1
        try:
            return await SSHSession.connect(
                host, user, port=port, pkey=pkey, key_filename=key_filename
            )
        except (paramiko.AuthenticationException, paramiko.BadHostKeyException) as e:
            raise LaunchError(f"{user}@{host} refused the SSH session: {e}") from e
        except (paramiko.SSHException, OSError, EOFError) as e:
            # refused, timed out or no banner yet while the VM boots
            if deadline is not None and time.monotonic() >= deadline:
                raise LaunchTimeoutError(
                    f"{user}@{host} not reachable over SSH after {attempt} attempts: {e}"
                ) from e
            await asyncio.sleep(Environment.SSH.CONNECT_RETRY_INTERVAL)
