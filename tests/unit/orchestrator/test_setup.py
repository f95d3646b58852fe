# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

import pytest

from nodebench.common.exceptions import InstallError, SetupError
from nodebench.orchestrator.installer import InstallStep, RetryingInstaller
from nodebench.orchestrator.setup import NodeSetup
from tests.harness.fakes import FakeSession


class TestNodeSetup:
    @pytest.fixture
    def installer(self) -> RetryingInstaller:
        return RetryingInstaller([InstallStep("deps", "install-deps")], max_retries=0, retry_delay=0)

    @pytest.mark.asyncio
    async def test_installs_then_copies_artifacts(self, bench_bin: Path, script: Path, installer):
        session = FakeSession()

        await NodeSetup(bench_bin, script, installer)(session)

        assert session.shell_calls == ["install-deps", "chmod +x bench"]
        assert session.files["bench"] == bench_bin.read_bytes()
        assert session.files["bench.py"] == script.read_bytes()

    def test_remote_paths_are_base_names(self, bench_bin: Path, script: Path, installer):
        setup = NodeSetup(bench_bin, script, installer)

        assert setup.bench_remote_path == Path("bench")
        assert setup.script_remote_path == Path("bench.py")

    @pytest.mark.asyncio
    async def test_install_failure_stops_setup(self, bench_bin: Path, script: Path, installer):
        session = FakeSession(shell_statuses=[1])

        with pytest.raises(InstallError):
            await NodeSetup(bench_bin, script, installer)(session)

        assert session.files == {}

    @pytest.mark.asyncio
    async def test_chmod_failure_raises_setup_error(self, bench_bin: Path, script: Path, installer):
        session = FakeSession(shell_statuses=[0, 126])

        with pytest.raises(SetupError, match="chmod bench"):
            await NodeSetup(bench_bin, script, installer)(session)

        assert "bench.py" not in session.files
