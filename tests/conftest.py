# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for the unit tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from nodebench.common.config import AwsNode, BaremetalNode, RunConfig, RunOptions
from nodebench.orchestrator.installer import RetryingInstaller


@pytest.fixture
def bench_bin(tmp_path: Path) -> Path:
    path = tmp_path / "local" / "bench"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\x7fELF fake bench binary")
    return path


@pytest.fixture
def script(tmp_path: Path) -> Path:
    path = tmp_path / "local" / "bench.py"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("import sys\nprint(sys.argv)\n")
    return path


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture
def run_options(output_dir: Path) -> RunOptions:
    return RunOptions(output_dir=output_dir, write_summary=False)


@pytest.fixture
def make_run_config(bench_bin: Path, script: Path) -> Callable[..., RunConfig]:
    def _make(*nodes) -> RunConfig:
        return RunConfig(nodes=list(nodes), bench_bin=bench_bin, script=script)

    return _make


@pytest.fixture
def aws_node() -> AwsNode:
    return AwsNode(region="us-east-1")


@pytest.fixture
def static_node() -> BaremetalNode:
    return BaremetalNode(ip="10.0.0.7", user="bench")


@pytest.fixture
def fast_installer() -> RetryingInstaller:
    return RetryingInstaller(max_retries=15, retry_delay=0)
