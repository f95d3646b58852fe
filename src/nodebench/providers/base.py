# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Uniform launch/connect/terminate contract implemented once per backend."""

import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from nodebench.common.exceptions import LaunchError, LaunchTimeoutError
from nodebench.common.mixins import NodeBenchLoggerMixin
from nodebench.remote.session import RemoteSession

__all__ = [
    "ProviderAdapter",
    "SetupHook",
]

SetupHook = Callable[[RemoteSession], Awaitable[None]]
"""One-time remote configuration run once a machine is reachable."""


class ProviderAdapter(NodeBenchLoggerMixin, ABC):
    """Base class for backend adapters.

    Subclasses implement:
    - validate(): reject bad regions/addresses before anything is spent
    - _provision(): bring up one machine and return a connected session
    - terminate_all(): release whatever _provision created

    The base class owns the launch sequence: provision under the launch
    timeout, then run the setup hook, then keep the session for connect_all.
    """

    default_launch_timeout: float | None = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._sessions: dict[str, RemoteSession] = {}

    @property
    @abstractmethod
    def provider_tag(self) -> str:
        """Tag used for the log file and result file names."""

    @property
    def owns_resources(self) -> bool:
        """Whether terminate_all releases infrastructure this adapter created."""
        return True

    @abstractmethod
    async def validate(self) -> None:
        """Validate provider-specific settings.

        Raises:
            ConfigurationError: If the region/address is not usable.
        """

    @abstractmethod
    async def _provision(self, machine_name: str) -> RemoteSession:
        """Create (or reach) the machine and return a connected session."""

    @abstractmethod
    async def terminate_all(self) -> None:
        """Release every resource this adapter created. Must be idempotent.

        Raises:
            TerminateError: If a resource could not be released.
        """

    async def launch(
        self,
        machine_name: str,
        setup_hook: SetupHook,
        launch_timeout: float | None = None,
    ) -> None:
        """Bring up ``machine_name`` and run ``setup_hook`` against it.

        Args:
            machine_name: Key under which connect_all returns the session
            setup_hook: Remote configuration to run before the machine is handed out
            launch_timeout: Bound on provisioning up to SSH reachability; falls
                back to ``default_launch_timeout``. None waits indefinitely.

        Raises:
            LaunchTimeoutError: Provisioning exceeded the timeout.
            LaunchError: The provider failed to create the machine.
            Exception: Whatever the setup hook raised, unchanged.
        """
        timeout = launch_timeout if launch_timeout is not None else self.default_launch_timeout
        self.info(f"launching {machine_name} on {self.provider_tag} (timeout={timeout})")

        try:
            if timeout is None:
                session = await self._provision(machine_name)
            else:
                session = await asyncio.wait_for(self._provision(machine_name), timeout)
        except asyncio.TimeoutError as e:
            raise LaunchTimeoutError(
                f"{machine_name} on {self.provider_tag} not ready after {timeout}s"
            ) from e

        self.info(f"{machine_name} reachable, running setup")
        try:
            await setup_hook(session)
        except BaseException:
            await self._close_quietly(session)
            raise
        self._sessions[machine_name] = session

    async def connect_all(self) -> dict[str, RemoteSession]:
        """Return the sessions of every launched machine, keyed by machine name."""
        if not self._sessions:
            raise LaunchError(f"no machines launched on {self.provider_tag}")
        return dict(self._sessions)

    async def disconnect_all(self) -> None:
        """Close every session handed out by connect_all."""
        sessions, self._sessions = self._sessions, {}
        for session in sessions.values():
            await self._close_quietly(session)

    async def _close_quietly(self, session: RemoteSession) -> None:
        try:
            await session.close()
        except Exception as e:
            self.warning(f"error closing session {session!r}: {e!r}")
