# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
import socket

from nodebench.common.config import BaremetalNode
from nodebench.common.exceptions import ConfigurationError
from nodebench.providers.base import ProviderAdapter
from nodebench.remote.session import RemoteSession
from nodebench.remote.ssh import SSHSession

__all__ = ["BaremetalAdapter"]


class BaremetalAdapter(ProviderAdapter):
    """Connects to a pre-existing host. Nothing is created, so nothing is torn down."""

    def __init__(self, node: BaremetalNode, **kwargs) -> None:
        super().__init__(**kwargs)
        self.address = node.ip
        self.user = node.user
        self.port = node.port
        self._tag = node.provider_tag

    @property
    def provider_tag(self) -> str:
        return self._tag

    @property
    def owns_resources(self) -> bool:
        return False

    async def validate(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.getaddrinfo(self.address, self.port, type=socket.SOCK_STREAM)
        except socket.gaierror as e:
            raise ConfigurationError(
                f"Cannot resolve static host '{self.address}:{self.port}': {e}"
            ) from e

    async def _provision(self, machine_name: str) -> RemoteSession:
        return await SSHSession.connect(self.address, self.user, port=self.port)

    async def terminate_all(self) -> None:
        # the host is not ours to destroy
        self.debug(f"not terminating static host {self.address}")
