# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Process-level tunables read from the environment.

Settings are grouped and addressed as ``Environment.<GROUP>.<FIELD>``. Each
field maps to ``NODEBENCH_<GROUP>_<FIELD>``, e.g. ``NODEBENCH_INSTALL_MAX_RETRIES``.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from nodebench.common.enums import LaunchMode

__all__ = ["Environment"]


class _InstallSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NODEBENCH_INSTALL_")

    MAX_RETRIES: int = Field(
        default=15,
        ge=0,
        description="Retries of the whole install sequence after the first attempt fails",
    )
    RETRY_DELAY: float = Field(
        default=0.1, ge=0, description="Seconds to sleep between install attempts"
    )


class _SSHSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NODEBENCH_SSH_")

    PORT: int = Field(default=22, gt=0, lt=65536)
    CONNECT_TIMEOUT: float = Field(
        default=20.0, gt=0, description="Timeout of a single SSH connect attempt"
    )
    CONNECT_RETRY_INTERVAL: float = Field(
        default=5.0,
        ge=0,
        description="Seconds between SSH connect attempts while a VM is booting",
    )
    KEY_FILENAME: Path | None = Field(
        default=None,
        description="Private key used for static hosts and Azure VMs (default: agent and ~/.ssh)",
    )


class _AwsSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NODEBENCH_AWS_")

    INSTANCE_TYPE: str = "t3.medium"
    LAUNCH_TIMEOUT: float | None = Field(default=180.0, gt=0)
    LAUNCH_MODE: LaunchMode = LaunchMode.TRY_SPOT
    UBUNTU_RELEASE: str = "20.04"
    SSH_USER: str = "ubuntu"


class _AzureSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NODEBENCH_AZURE_")

    INSTANCE_TYPE: str = "Standard_B2ms"
    IMAGE: str = "Canonical:0001-com-ubuntu-server-focal:20_04-lts:latest"
    LAUNCH_TIMEOUT: float | None = Field(default=None, gt=0)
    SSH_USER: str = "ubuntu"


class _CollectSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="NODEBENCH_COLLECT_")

    FETCH_RETRIES: int = Field(
        default=2,
        ge=0,
        description="Extra attempts for a result file whose fetch failed with a transport error",
    )
    FETCH_RETRY_DELAY: float = Field(default=0.5, ge=0)


class Environment:
    """Namespace holding one instance of every settings group."""

    INSTALL = _InstallSettings()
    SSH = _SSHSettings()
    AWS = _AwsSettings()
    AZURE = _AzureSettings()
    COLLECT = _CollectSettings()
