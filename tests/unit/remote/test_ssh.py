# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the paramiko-backed session, with paramiko objects mocked out."""

import errno
import threading
from unittest.mock import MagicMock, patch

import paramiko
import pytest

from nodebench.common.exceptions import LaunchError, LaunchTimeoutError, RemoteTransportError
from nodebench.remote.ssh import SFTPRemoteFile, SSHSession, wait_for_ssh


def _exec_result(status: int, stdout: bytes = b"", stderr: bytes = b""):
    out = MagicMock()
    out.read.return_value = stdout
    out.channel.recv_exit_status.return_value = status
    err = MagicMock()
    err.read.return_value = stderr
    return MagicMock(), out, err


class TestSSHSession:
    @pytest.fixture
    def client(self):
        return MagicMock(spec=paramiko.SSHClient)

    @pytest.mark.asyncio
    async def test_shell_returns_exit_status(self, client):
        client.exec_command.return_value = _exec_result(3)
        session = SSHSession(client, "host")

        assert await session.shell("sudo apt update") == 3
        client.exec_command.assert_called_once_with("sudo apt update")

    @pytest.mark.asyncio
    async def test_command_quotes_arguments(self, client):
        client.exec_command.return_value = _exec_result(0, b"out", b"err")
        session = SSHSession(client, "host")

        output = await session.command("python3", ["bench.py", "./bench", "my tag"])

        client.exec_command.assert_called_once_with("python3 bench.py ./bench 'my tag'")
        assert output.status == 0
        assert output.stdout == b"out"
        assert output.stderr == b"err"

    @pytest.mark.asyncio
    async def test_stdout_and_stderr_drained_together(self, client):
        stderr_drained = threading.Event()
        out = MagicMock()
        # stdout only reaches EOF once the peer has flushed stderr
        out.read.side_effect = lambda: b"out" if stderr_drained.wait(timeout=5) else b""
        out.channel.recv_exit_status.return_value = 0
        err = MagicMock()
        err.read.side_effect = lambda: stderr_drained.set() or b"err"
        client.exec_command.return_value = (MagicMock(), out, err)
        session = SSHSession(client, "host")

        output = await session.command("python3", ["bench.py"])

        assert output.stdout == b"out"
        assert output.stderr == b"err"

    @pytest.mark.asyncio
    async def test_exec_transport_failure_wrapped(self, client):
        client.exec_command.side_effect = paramiko.SSHException("channel closed")
        session = SSHSession(client, "host")

        with pytest.raises(RemoteTransportError, match="channel closed"):
            await session.shell("true")

    @pytest.mark.asyncio
    async def test_read_from_missing_file_raises_file_not_found(self, client):
        sftp = client.open_sftp.return_value
        sftp.open.side_effect = OSError(errno.ENOENT, "No such file")
        session = SSHSession(client, "host")

        with pytest.raises(FileNotFoundError):
            await session.read_from("exp-aws.data")

    @pytest.mark.asyncio
    async def test_read_from_other_failure_is_transport_error(self, client):
        sftp = client.open_sftp.return_value
        sftp.open.side_effect = EOFError()
        session = SSHSession(client, "host")

        with pytest.raises(RemoteTransportError):
            await session.read_from("exp-aws.data")

    @pytest.mark.asyncio
    async def test_sftp_channel_opened_once(self, client):
        session = SSHSession(client, "host")

        await session.write_to("a")
        await session.write_to("b")

        client.open_sftp.assert_called_once()

    @pytest.mark.asyncio
    async def test_close_closes_sftp_and_client(self, client):
        session = SSHSession(client, "host")
        await session.write_to("a")

        await session.close()

        client.open_sftp.return_value.close.assert_called_once()
        client.close.assert_called_once()


class TestSFTPRemoteFile:
    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        handle = MagicMock()
        remote = SFTPRemoteFile(handle, "bench")

        await remote.close()
        await remote.close()

        handle.close.assert_called_once()

    @pytest.mark.asyncio
    async def test_read_error_wrapped(self):
        handle = MagicMock()
        handle.read.side_effect = paramiko.SSHException("reset")

        with pytest.raises(RemoteTransportError, match="read bench"):
            await SFTPRemoteFile(handle, "bench").read(10)


class TestWaitForSSH:
    @pytest.mark.asyncio
    async def test_retries_until_connected(self):
        session = MagicMock()
        connect = patch.object(
            SSHSession,
            "connect",
            side_effect=[ConnectionRefusedError(), ConnectionRefusedError(), session],
        )
        with connect as mock_connect, patch("nodebench.remote.ssh.asyncio.sleep") as mock_sleep:
            result = await wait_for_ssh("1.2.3.4", "ubuntu", timeout=None)

        assert result is session
        assert mock_connect.call_count == 3
        assert mock_sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_deadline(self):
        with (
            patch.object(SSHSession, "connect", side_effect=ConnectionRefusedError("refused")),
            patch("nodebench.remote.ssh.asyncio.sleep") as mock_sleep,
        ):
            with pytest.raises(LaunchTimeoutError, match="not reachable over SSH after 1 attempts"):
                await wait_for_ssh("1.2.3.4", "ubuntu", timeout=0)

        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            paramiko.AuthenticationException("bad key"),
            paramiko.BadHostKeyException("1.2.3.4", MagicMock(), MagicMock()),
        ],
    )
    async def test_rejected_session_is_not_retried(self, error):
        with (
            patch.object(SSHSession, "connect", side_effect=error) as mock_connect,
            patch("nodebench.remote.ssh.asyncio.sleep") as mock_sleep,
        ):
            with pytest.raises(LaunchError, match="refused the SSH session"):
                await wait_for_ssh("1.2.3.4", "ubuntu", timeout=None)

        assert mock_connect.call_count == 1
        mock_sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_banner_is_retried(self):
        session = MagicMock()
        with (
            patch.object(
                SSHSession,
                "connect",
                side_effect=[paramiko.SSHException("Error reading SSH protocol banner"), session],
            ) as mock_connect,
            patch("nodebench.remote.ssh.asyncio.sleep"),
        ):
            assert await wait_for_ssh("1.2.3.4", "ubuntu", timeout=None) is session

        assert mock_connect.call_count == 2
