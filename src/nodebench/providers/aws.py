# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""EC2 adapter.

Every launch creates its own key pair and SSH security group and tags the
instance with a per-adapter run id, so terminate_all can find and release
everything even when a launch was interrupted half-way.
"""

import asyncio
import io
import uuid
from typing import Any

import boto3
import paramiko
from botocore.exceptions import BotoCoreError, ClientError

from nodebench.common.config import AwsNode
from nodebench.common.enums import LaunchMode
from nodebench.common.environment import Environment
from nodebench.common.exceptions import ConfigurationError, ProviderAPIError, TerminateError
from nodebench.providers.base import ProviderAdapter
from nodebench.remote.session import RemoteSession
from nodebench.remote.ssh import wait_for_ssh

__all__ = ["AwsAdapter"]

RUN_TAG_KEY = "nodebench-run"

UBUNTU_AMI_PARAMETER = (
    "/aws/service/canonical/ubuntu/server/{release}/stable/current/amd64/hvm/ebs-gp2/ami-id"
)

# run_instances error codes after which TRY_SPOT retries on-demand
SPOT_UNAVAILABLE_CODES = frozenset(
    {
        "InsufficientInstanceCapacity",
        "InsufficientCapacity",
        "MaxSpotInstanceCountExceeded",
        "SpotMaxPriceTooLow",
        "UnfulfillableCapacity",
    }
)

_AWS_ERRORS = (ClientError, BotoCoreError)


class AwsAdapter(ProviderAdapter):
    """Launches one Ubuntu instance in the descriptor's region."""

    def __init__(
        self,
        node: AwsNode,
        instance_type: str | None = None,
        launch_mode: LaunchMode | None = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.region = node.region
        self.instance_type = instance_type or node.instance_type or Environment.AWS.INSTANCE_TYPE
        self.launch_mode = launch_mode or Environment.AWS.LAUNCH_MODE
        self.default_launch_timeout = Environment.AWS.LAUNCH_TIMEOUT
        self.run_id = f"nodebench-{uuid.uuid4().hex[:12]}"

        self._ec2: Any = None
        self._started = False
        self._key_name: str | None = None
        self._security_group_id: str | None = None
        self._instance_ids: list[str] = []

    @property
    def provider_tag(self) -> str:
        return "aws"

    def _ec2_client(self) -> Any:
        if self._ec2 is None:
            self._ec2 = boto3.client("ec2", region_name=self.region)
        return self._ec2

    async def validate(self) -> None:
        regions = await asyncio.to_thread(boto3.session.Session().get_available_regions, "ec2")
        if regions and self.region not in regions:
            raise ConfigurationError(
                f"Unknown AWS region '{self.region}'. Known regions: {', '.join(sorted(regions))}"
            )

    async def _provision(self, machine_name: str) -> RemoteSession:
        self._started = True
        try:
            ami = await self._latest_ubuntu_ami()
            pkey = await self._create_key_pair()
            await self._create_security_group()
            instance_id = await self._run_instance(machine_name, ami)
            public_ip = await self._wait_running(instance_id)
        except _AWS_ERRORS as e:
            raise ProviderAPIError(f"EC2 launch in {self.region} failed: {e}") from e

        self.info(f"{machine_name} ({instance_id}) running at {public_ip}")
        return await wait_for_ssh(
            public_ip, Environment.AWS.SSH_USER, timeout=None, pkey=pkey
        )

    async def _latest_ubuntu_ami(self) -> str:
        ssm = boto3.client("ssm", region_name=self.region)
        name = UBUNTU_AMI_PARAMETER.format(release=Environment.AWS.UBUNTU_RELEASE)
        response = await asyncio.to_thread(ssm.get_parameter, Name=name)
        ami = response["Parameter"]["Value"]
        self.debug(f"using AMI {ami} for Ubuntu {Environment.AWS.UBUNTU_RELEASE}")
        return ami

    async def _create_key_pair(self) -> paramiko.PKey:
        response = await asyncio.to_thread(
            self._ec2_client().create_key_pair, KeyName=self.run_id, KeyType="ed25519"
        )
        self._key_name = self.run_id
        return paramiko.Ed25519Key.from_private_key(io.StringIO(response["KeyMaterial"]))

    async def _create_security_group(self) -> None:
        ec2 = self._ec2_client()
        response = await asyncio.to_thread(
            ec2.create_security_group,
            GroupName=self.run_id,
            Description="nodebench SSH access",
        )
        self._security_group_id = response["GroupId"]
        await asyncio.to_thread(
            ec2.authorize_security_group_ingress,
            GroupId=self._security_group_id,
            IpPermissions=[
                {
                    "IpProtocol": "tcp",
                    "FromPort": 22,
                    "ToPort": 22,
                    "IpRanges": [{"CidrIp": "0.0.0.0/0"}],
                }
            ],
        )

    def _launch_params(self, machine_name: str, ami: str, spot: bool) -> dict[str, Any]:
        params: dict[str, Any] = {
            "ImageId": ami,
            "InstanceType": self.instance_type,
            "MinCount": 1,
            "MaxCount": 1,
            "KeyName": self._key_name,
            "SecurityGroupIds": [self._security_group_id],
            "InstanceInitiatedShutdownBehavior": "terminate",
            "TagSpecifications": [
                {
                    "ResourceType": "instance",
                    "Tags": [
                        {"Key": "Name", "Value": machine_name},
                        {"Key": RUN_TAG_KEY, "Value": self.run_id},
                    ],
                }
            ],
        }
        if spot:
            params["InstanceMarketOptions"] = {
                "MarketType": "spot",
                "SpotOptions": {
                    "SpotInstanceType": "one-time",
                    "InstanceInterruptionBehavior": "terminate",
                },
            }
        return params

    async def _run_instance(self, machine_name: str, ami: str) -> str:
        ec2 = self._ec2_client()
        spot = self.launch_mode in (LaunchMode.SPOT, LaunchMode.TRY_SPOT)
        try:
            response = await asyncio.to_thread(
                ec2.run_instances, **self._launch_params(machine_name, ami, spot)
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if not (self.launch_mode == LaunchMode.TRY_SPOT and code in SPOT_UNAVAILABLE_CODES):
                raise
            self.warning(f"spot capacity unavailable ({code}), falling back to on-demand")
            response = await asyncio.to_thread(
                ec2.run_instances, **self._launch_params(machine_name, ami, spot=False)
            )

        instance_id = response["Instances"][0]["InstanceId"]
        self._instance_ids.append(instance_id)
        return instance_id

    async def _wait_running(self, instance_id: str) -> str:
        ec2 = self._ec2_client()
        self.debug(f"waiting for {instance_id} to be running")
        waiter = ec2.get_waiter("instance_running")
        await asyncio.to_thread(waiter.wait, InstanceIds=[instance_id])
        response = await asyncio.to_thread(ec2.describe_instances, InstanceIds=[instance_id])
        public_ip = response["Reservations"][0]["Instances"][0].get("PublicIpAddress")
        if not public_ip:
            raise ProviderAPIError(f"{instance_id} has no public IP address")
        return public_ip

    async def _find_instances(self) -> list[str]:
        ec2 = self._ec2_client()
        response = await asyncio.to_thread(
            ec2.describe_instances,
            Filters=[
                {"Name": f"tag:{RUN_TAG_KEY}", "Values": [self.run_id]},
                {
                    "Name": "instance-state-name",
                    "Values": ["pending", "running", "stopping", "stopped"],
                },
            ],
        )
        found = [
            instance["InstanceId"]
            for reservation in response.get("Reservations", [])
            for instance in reservation.get("Instances", [])
        ]
        return sorted(set(found) | set(self._instance_ids))

    async def terminate_all(self) -> None:
        await self.disconnect_all()
        if not self._started:
            return

        ec2 = self._ec2_client()
        instance_ids: list[str] = list(self._instance_ids)
        try:
            instance_ids = await self._find_instances()
            if instance_ids:
                self.info(f"terminating {', '.join(instance_ids)}")
                await asyncio.to_thread(ec2.terminate_instances, InstanceIds=instance_ids)
                waiter = ec2.get_waiter("instance_terminated")
                await asyncio.to_thread(waiter.wait, InstanceIds=instance_ids)
            if self._security_group_id:
                await asyncio.to_thread(
                    ec2.delete_security_group, GroupId=self._security_group_id
                )
            if self._key_name:
                await asyncio.to_thread(ec2.delete_key_pair, KeyName=self._key_name)
        except _AWS_ERRORS as e:
            raise TerminateError(
                f"Failed to release AWS resources in {self.region} "
                f"(instances: {instance_ids or 'none'}, security group: "
                f"{self._security_group_id}, key pair: {self._key_name}); "
                f"they may still be running and billing: {e}"
            ) from e

        self._instance_ids.clear()
        self._security_group_id = None
        self._key_name = None
        self._started = False
