# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Runs the experiment driver on a node and keeps its output."""

import asyncio
import os
from pathlib import Path

from rich.console import Console

from nodebench.common.exceptions import RemoteTransportError, RunError
from nodebench.common.mixins import NodeBenchLoggerMixin
from nodebench.orchestrator.models import ExperimentOutcome
from nodebench.remote.session import RemoteSession

__all__ = ["ExperimentRunner"]


class ExperimentRunner(NodeBenchLoggerMixin):
    """Invokes ``python3 <script> ./<bench> <provider_tag>`` remotely.

    A non-zero exit status is reported but not raised: the driver may have
    produced some result files before failing and those are still collected.
    """

    def __init__(
        self,
        output_dir: Path = Path("."),
        interpreter: str = "python3",
        console: Console | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.output_dir = Path(output_dir)
        self.interpreter = interpreter
        self.console = console or Console(stderr=True)

    @staticmethod
    def build_args(script_remote_path: Path, bench_remote_path: Path, provider_tag: str) -> list[str]:
        """Positional arguments for the driver. The bench path is made explicitly relative."""
        return [
            str(script_remote_path),
            os.path.join(".", str(bench_remote_path)),
            provider_tag,
        ]

    async def run(
        self,
        session: RemoteSession,
        script_remote_path: Path,
        bench_remote_path: Path,
        provider_tag: str,
    ) -> ExperimentOutcome:
        """Run the driver and write its stdout to ``<output_dir>/<provider_tag>.log``.

        Raises:
            RunError: If the command could not be executed at all.
        """
        args = self.build_args(script_remote_path, bench_remote_path, provider_tag)
        self.info(f"running {self.interpreter} {' '.join(args)}")

        try:
            output = await session.command(self.interpreter, args)
        except RemoteTransportError as e:
            raise RunError(f"experiment driver on {provider_tag} could not run: {e}") from e

        if not output.success:
            self.warning(f"script failed with exit status {output.status}")
            self.console.print(output.stderr.decode(errors="replace"), markup=False, highlight=False)

        await asyncio.to_thread(self.output_dir.mkdir, parents=True, exist_ok=True)
        log_path = self.output_dir / f"{provider_tag}.log"
        await asyncio.to_thread(log_path.write_bytes, output.stdout)
        self.info(f"done, driver output in {log_path}")

        return ExperimentOutcome(exit_status=output.status, log_path=log_path)
