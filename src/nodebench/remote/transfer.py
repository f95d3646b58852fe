# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Streaming file copies between the local machine and a RemoteSession.

Local file I/O runs in worker threads, like every other blocking call on the
orchestration path.
"""

import asyncio
import logging
from pathlib import Path

from nodebench.remote.session import RemoteSession

logger = logging.getLogger(__name__)

CHUNK_SIZE = 32 * 1024


async def write_file(session: RemoteSession, local_path: Path, remote_path: Path | str) -> int:
    """Upload a local file.

    The local file is opened first, so a missing local file leaves the remote
    side untouched. The remote handle is closed even if the copy fails.

    Returns:
        Number of bytes written
    """
    logger.debug(f"writing file {local_path} -> {remote_path}")
    local = await asyncio.to_thread(open, local_path, "rb")
    try:
        remote = await session.write_to(str(remote_path))
        written = 0
        try:
            while chunk := await asyncio.to_thread(local.read, CHUNK_SIZE):
                await remote.write(chunk)
                written += len(chunk)
        finally:
            await remote.close()
    finally:
        local.close()
    return written


async def fetch_file(session: RemoteSession, remote_path: Path | str, local_path: Path) -> int:
    """Download a remote file.

    Opening happens before the local file is created, so a missing remote
    file (FileNotFoundError) leaves nothing behind locally.

    Returns:
        Number of bytes copied
    """
    remote = await session.read_from(str(remote_path))
    copied = 0
    try:
        local = await asyncio.to_thread(open, local_path, "wb")
        try:
            while chunk := await remote.read(CHUNK_SIZE):
                await asyncio.to_thread(local.write, chunk)
                copied += len(chunk)
        finally:
            local.close()
    finally:
        await remote.close()
    logger.debug(f"fetched {remote_path} ({copied} bytes)")
    return copied
