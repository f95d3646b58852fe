# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Azure adapter driven through the ``az`` CLI.

The VM and everything ``az vm create`` attaches to it (NIC, disk, public IP,
NSG) live in a resource group created for this launch; terminate_all deletes
the group.
"""

import asyncio
import shutil
import uuid
from typing import Any

import orjson

from nodebench.common.config import AzureNode
from nodebench.common.environment import Environment
from nodebench.common.exceptions import ConfigurationError, ProviderAPIError, TerminateError
from nodebench.providers.base import ProviderAdapter
from nodebench.remote.session import RemoteSession
from nodebench.remote.ssh import wait_for_ssh

__all__ = ["AzureAdapter", "AzureCLIError"]


class AzureCLIError(ProviderAPIError):
    """An ``az`` invocation exited non-zero."""


class AzureAdapter(ProviderAdapter):
    """Launches one Ubuntu VM in the descriptor's location."""

    def __init__(self, node: AzureNode, instance_type: str | None = None, **kwargs) -> None:
        super().__init__(**kwargs)
        self.region = node.region
        self.instance_type = instance_type or node.instance_type or Environment.AZURE.INSTANCE_TYPE
        self.image = Environment.AZURE.IMAGE
        self.default_launch_timeout = Environment.AZURE.LAUNCH_TIMEOUT
        self.resource_group = f"nodebench-{uuid.uuid4().hex[:12]}"
        self._group_created = False

    @property
    def provider_tag(self) -> str:
        return "azure"

    async def _az(self, *args: str) -> Any:
        """Run ``az <args> --output json`` and return the decoded output."""
        if shutil.which("az") is None:
            raise ProviderAPIError("the Azure CLI (az) is not installed or not on PATH")

        self.debug(f"az {' '.join(args)}")
        proc = await asyncio.create_subprocess_exec(
            "az",
            *args,
            "--output",
            "json",
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
        stdout, stderr = await proc.communicate()
        if proc.returncode != 0:
            raise AzureCLIError(
                f"az {args[0]} {args[1] if len(args) > 1 else ''} failed "
                f"(exit {proc.returncode}): {stderr.decode(errors='replace').strip()}"
            )
        return orjson.loads(stdout) if stdout.strip() else None

    async def validate(self) -> None:
        locations = await self._az("account", "list-locations", "--query", "[].name")
        if locations and self.region not in locations:
            raise ConfigurationError(
                f"Unknown Azure location '{self.region}'. Known locations: {', '.join(sorted(locations))}"
            )

    async def _provision(self, machine_name: str) -> RemoteSession:
        await self._az(
            "group", "create", "--name", self.resource_group, "--location", self.region
        )
        self._group_created = True

        vm = await self._az(
            "vm",
            "create",
            "--resource-group",
            self.resource_group,
            "--name",
            machine_name,
            "--image",
            self.image,
            "--size",
            self.instance_type,
            "--admin-username",
            Environment.AZURE.SSH_USER,
            "--generate-ssh-keys",
            "--public-ip-sku",
            "Standard",
        )
        public_ip = (vm or {}).get("publicIpAddress")
        if not public_ip:
            raise ProviderAPIError(f"az vm create returned no public IP for {machine_name}")

        self.info(f"{machine_name} running at {public_ip}")
        return await wait_for_ssh(public_ip, Environment.AZURE.SSH_USER, timeout=None)

    async def terminate_all(self) -> None:
        await self.disconnect_all()
        if not self._group_created:
            return

        self.info(f"deleting resource group {self.resource_group}")
        try:
            await self._az("group", "delete", "--name", self.resource_group, "--yes")
        except ProviderAPIError as e:
            raise TerminateError(
                f"Failed to delete Azure resource group {self.resource_group}; "
                f"its VM may still be running and billing: {e}"
            ) from e
        self._group_created = False
