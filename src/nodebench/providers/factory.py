# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from nodebench.common.config import AwsNode, AzureNode, BaremetalNode, NodeDescriptor
from nodebench.providers.aws import AwsAdapter
from nodebench.providers.azure import AzureAdapter
from nodebench.providers.base import ProviderAdapter
from nodebench.providers.baremetal import BaremetalAdapter

__all__ = ["create_provider_adapter"]

_ADAPTERS: dict[type[NodeDescriptor], type[ProviderAdapter]] = {
    AwsNode: AwsAdapter,
    AzureNode: AzureAdapter,
    BaremetalNode: BaremetalAdapter,
}


def create_provider_adapter(descriptor: NodeDescriptor) -> ProviderAdapter:
    """Build the adapter matching a descriptor's variant."""
    try:
        adapter_cls = _ADAPTERS[type(descriptor)]
    except KeyError:
        raise TypeError(f"no provider adapter for {type(descriptor).__name__}") from None
    return adapter_cls(descriptor)
