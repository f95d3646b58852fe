# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Run configuration: node descriptors, local artifacts and run options."""

from abc import abstractmethod
from pathlib import Path
from typing import Any, ClassVar

import orjson
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from nodebench.common.enums import ProviderKind
from nodebench.common.exceptions import ConfigurationError, PreflightError

__all__ = [
    "AwsNode",
    "AzureNode",
    "BaremetalNode",
    "NodeDescriptor",
    "RunConfig",
    "RunOptions",
    "load_node_descriptors",
    "parse_node_descriptors",
]


class NodeDescriptor(BaseModel):
    """One target machine and how to obtain it.

    Concrete descriptors are AwsNode, AzureNode and BaremetalNode. In the
    config file each is an object with a single key naming the variant, e.g.
    ``{"Aws": {"region": "us-east-1"}}``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: ClassVar[ProviderKind]

    @property
    @abstractmethod
    def provider_tag(self) -> str:
        """Tag used in the log file name and in result file names."""

    def describe(self) -> str:
        fields = ", ".join(f"{k}={v}" for k, v in self.model_dump().items())
        return f"{self.kind.value}({fields})"


class AwsNode(NodeDescriptor):
    kind: ClassVar[ProviderKind] = ProviderKind.AWS

    region: str = Field(min_length=1, description="EC2 region, e.g. us-east-1")
    instance_type: str | None = Field(
        default=None, description="Overrides NODEBENCH_AWS_INSTANCE_TYPE"
    )

    @property
    def provider_tag(self) -> str:
        return "aws"


class AzureNode(NodeDescriptor):
    kind: ClassVar[ProviderKind] = ProviderKind.AZURE

    region: str = Field(min_length=1, description="Azure location, e.g. eastus")
    instance_type: str | None = Field(
        default=None, description="Overrides NODEBENCH_AZURE_INSTANCE_TYPE"
    )

    @property
    def provider_tag(self) -> str:
        return "azure"


class BaremetalNode(NodeDescriptor):
    kind: ClassVar[ProviderKind] = ProviderKind.BAREMETAL

    ip: str = Field(min_length=1, description="Address or hostname of the host")
    user: str = Field(min_length=1, description="SSH login user")
    port: int = Field(default=22, gt=0, lt=65536)
    # Static hosts have been GCP VMs so far; keeps existing result names stable.
    tag: str = Field(default="gcp", min_length=1)

    @property
    def provider_tag(self) -> str:
        return self.tag


_DESCRIPTOR_TYPES: dict[str, type[NodeDescriptor]] = {
    cls.kind.value: cls for cls in (AwsNode, AzureNode, BaremetalNode)
}


def parse_node_descriptors(raw: bytes | str, source: str = "<config>") -> list[NodeDescriptor]:
    """Decode a JSON array of externally tagged node descriptors.

    Raises:
        ConfigurationError: If the JSON is malformed or any entry is invalid.
    """
    try:
        data = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise ConfigurationError(f"parse cfg file json {source}: {e}") from e

    if not isinstance(data, list):
        raise ConfigurationError(
            f"{source}: expected a JSON array of node descriptors, got {type(data).__name__}"
        )

    return [_parse_entry(entry, index, source) for index, entry in enumerate(data)]


def _parse_entry(entry: Any, index: int, source: str) -> NodeDescriptor:
    if not isinstance(entry, dict) or len(entry) != 1:
        raise ConfigurationError(
            f"{source}[{index}]: each node must be an object with exactly one of "
            f"{sorted(_DESCRIPTOR_TYPES)} as its key"
        )

    tag, body = next(iter(entry.items()))
    descriptor_type = _DESCRIPTOR_TYPES.get(tag)
    if descriptor_type is None:
        raise ConfigurationError(
            f"{source}[{index}]: unknown node kind '{tag}', expected one of {sorted(_DESCRIPTOR_TYPES)}"
        )

    try:
        return descriptor_type.model_validate(body)
    except ValidationError as e:
        raise ConfigurationError(f"{source}[{index}] ({tag}): {e}") from e


def load_node_descriptors(path: Path) -> list[NodeDescriptor]:
    """Read and parse a node descriptor file."""
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise ConfigurationError(f"Open cfg file {path}: {e}") from e
    return parse_node_descriptors(raw, source=str(path))


class RunConfig(BaseModel):
    """Immutable inputs of one invocation.

    Attributes:
        nodes: Node descriptors, processed in order
        bench_bin: Local benchmark executable copied to every node
        script: Local experiment driver copied to every node
    """

    model_config = ConfigDict(frozen=True)

    nodes: list[NodeDescriptor]
    bench_bin: Path
    script: Path

    @field_validator("bench_bin", "script")
    @classmethod
    def _must_have_file_name(cls, v: Path) -> Path:
        if not v.name:
            raise ValueError(f"{v} does not name a file")
        return v

    @classmethod
    def load(cls, cfg: Path, bench_bin: Path, script: Path) -> "RunConfig":
        """Check local artifacts exist, then read the node descriptor file.

        Raises:
            PreflightError: If the bench binary or the script does not exist.
            ConfigurationError: If the descriptor file cannot be read or parsed.
        """
        bench_bin = Path(bench_bin)
        script = Path(script)
        if not bench_bin.is_file():
            raise PreflightError(f"Bench binary {bench_bin} not found")
        if not script.is_file():
            raise PreflightError(f"Script path {script} not found")

        nodes = load_node_descriptors(Path(cfg))
        return cls(nodes=nodes, bench_bin=bench_bin, script=script)


class RunOptions(BaseModel):
    """Operator choices that shape a run but not what is run."""

    model_config = ConfigDict(frozen=True)

    output_dir: Path = Field(
        default=Path("."), description="Where <tag>.log and exp-*.data files are written"
    )
    continue_on_error: bool = Field(
        default=False,
        description="Keep processing later nodes after a node fails",
    )
    pause_after_connect: bool = False
    pause_after_collect: bool = False
    launch_timeout: float | None = Field(
        default=None, gt=0, description="Overrides every provider's launch timeout"
    )
    write_summary: bool = True
