# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import logging
import shlex
from pathlib import Path

from nodebench.common.exceptions import SetupError
from nodebench.orchestrator.installer import RetryingInstaller
from nodebench.remote.session import RemoteSession
from nodebench.remote.transfer import write_file

logger = logging.getLogger(__name__)

__all__ = ["NodeSetup"]


class NodeSetup:
    """Setup hook handed to provider adapters.

    Installs dependencies, then copies the bench binary and the experiment
    script into the login directory under their local base names.
    """

    def __init__(
        self,
        bench_bin: Path,
        script: Path,
        installer: RetryingInstaller | None = None,
    ) -> None:
        self.bench_bin = Path(bench_bin)
        self.script = Path(script)
        self.bench_remote_path = Path(self.bench_bin.name)
        self.script_remote_path = Path(self.script.name)
        self.installer = installer or RetryingInstaller()

    async def __call__(self, session: RemoteSession) -> None:
        await self.installer.install_dependencies(session)

        await write_file(session, self.bench_bin, self.bench_remote_path)
        status = await session.shell(f"chmod +x {shlex.quote(str(self.bench_remote_path))}")
        if status != 0:
            raise SetupError(f"chmod bench (exit status {status})")

        await write_file(session, self.script, self.script_remote_path)
        logger.info(
            f"copied {self.bench_bin} -> {self.bench_remote_path}, {self.script} -> {self.script_remote_path}"
        )
