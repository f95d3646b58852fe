# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Provider adapters: one per backend, all with the same launch/connect/terminate contract."""

from nodebench.providers.aws import AwsAdapter
from nodebench.providers.azure import AzureAdapter, AzureCLIError
from nodebench.providers.baremetal import BaremetalAdapter
from nodebench.providers.base import ProviderAdapter, SetupHook
from nodebench.providers.factory import create_provider_adapter

__all__ = [
    "AwsAdapter",
    "AzureAdapter",
    "AzureCLIError",
    "BaremetalAdapter",
    "ProviderAdapter",
    "SetupHook",
    "create_provider_adapter",
]
