# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Remote dependency installation with whole-sequence retry.

Package mirrors and cloud-init still holding the apt lock make the first
minutes after boot flaky, so the full step list is retried as a unit: later
steps only make sense if earlier ones succeeded in the same attempt.
"""

import asyncio
from dataclasses import dataclass

from nodebench.common.environment import Environment
from nodebench.common.exceptions import InstallError, NodeBenchError
from nodebench.common.mixins import NodeBenchLoggerMixin
from nodebench.remote.session import RemoteSession

__all__ = ["DEFAULT_INSTALL_STEPS", "InstallStep", "RetryingInstaller"]


@dataclass(frozen=True, slots=True)
class InstallStep:
    """One remote shell command of the install sequence."""

    name: str
    command: str


DEFAULT_INSTALL_STEPS: tuple[InstallStep, ...] = (
    InstallStep(
        name="redis apt-add-repository",
        command="sudo add-apt-repository -y ppa:redislabs/redis",
    ),
    InstallStep(
        name="apt install",
        command=(
            "sudo apt update && sudo DEBIAN_FRONTEND=noninteractive apt install -y "
            "python3-pip redis && sudo /etc/init.d/redis-server stop"
        ),
    ),
    InstallStep(name="pip install", command="sudo pip3 install agenda"),
)


class _StepFailed(NodeBenchError):
    pass


class RetryingInstaller(NodeBenchLoggerMixin):
    """Runs the install steps in order, retrying the whole sequence on failure.

    Attributes:
        steps: Ordered shell steps
        max_retries: Attempts allowed after the first one fails
        retry_delay: Seconds to sleep between attempts
    """

    def __init__(
        self,
        steps: tuple[InstallStep, ...] | list[InstallStep] = DEFAULT_INSTALL_STEPS,
        max_retries: int | None = None,
        retry_delay: float | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.steps = tuple(steps)
        self.max_retries = Environment.INSTALL.MAX_RETRIES if max_retries is None else max_retries
        self.retry_delay = Environment.INSTALL.RETRY_DELAY if retry_delay is None else retry_delay
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")

    async def install_dependencies(self, session: RemoteSession) -> None:
        """Install everything the experiment needs on the node.

        Raises:
            InstallError: If all 1 + max_retries attempts failed. The last
                failure is chained as ``__cause__``.
        """
        attempts = 0
        while True:
            attempts += 1
            try:
                await self._run_steps(session)
            except NodeBenchError as e:
                self.warning(f"install attempt {attempts} failed: {e}")
                if attempts > self.max_retries:
                    raise InstallError(
                        f"dependency installation failed after {attempts} attempts: {e}",
                        attempts=attempts,
                    ) from e
            else:
                if attempts > 1:
                    self.info(f"dependencies installed after {attempts} attempts")
                return

            await asyncio.sleep(self.retry_delay)

    async def _run_steps(self, session: RemoteSession) -> None:
        for step in self.steps:
            self.trace(f"install step {step.name}: {step.command}")
            status = await session.shell(step.command)
            if status != 0:
                raise _StepFailed(f"{step.name} failed (exit status {status})")
