# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Remote shell execution and file transfer."""

from nodebench.remote.session import CommandOutput, RemoteFile, RemoteSession
from nodebench.remote.ssh import SFTPRemoteFile, SSHSession, wait_for_ssh
from nodebench.remote.transfer import fetch_file, write_file

__all__ = [
    "CommandOutput",
    "RemoteFile",
    "RemoteSession",
    "SFTPRemoteFile",
    "SSHSession",
    "fetch_file",
    "wait_for_ssh",
    "write_file",
]
