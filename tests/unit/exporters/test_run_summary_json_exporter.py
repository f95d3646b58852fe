# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path

import orjson
import pytest

from nodebench.common.enums import NodeState
from nodebench.exporters import RunSummaryExporterConfig, RunSummaryJsonExporter
from nodebench.orchestrator.models import CollectedSummary, ExperimentOutcome, NodeRunResult


@pytest.fixture
def results(output_dir: Path) -> list[NodeRunResult]:
    return [
        NodeRunResult(
            label="node_0001-gcp",
            descriptor="Baremetal(ip=10.0.0.7, user=bench, port=22, tag=gcp)",
            provider_tag="gcp",
            success=True,
            state=NodeState.DONE,
            history=[NodeState.PENDING, NodeState.LAUNCHING, NodeState.DONE],
            experiment=ExperimentOutcome(exit_status=0, log_path=output_dir / "gcp.log"),
            summary=CollectedSummary(considered=288, fetched=3, missing=["a"] * 285),
        ),
        NodeRunResult(
            label="node_0002-aws",
            descriptor="Aws(region=us-east-1, instance_type=None)",
            provider_tag="aws",
            success=False,
            state=NodeState.FAILED,
            error="quota exceeded",
        ),
    ]


class TestRunSummaryJsonExporter:
    @pytest.fixture
    def exporter(self, make_run_config, static_node, aws_node, results, output_dir):
        return RunSummaryJsonExporter(
            RunSummaryExporterConfig(
                run_config=make_run_config(static_node, aws_node, aws_node),
                results=results,
                output_dir=output_dir,
            )
        )

    def test_file_name(self, exporter):
        assert exporter.get_file_name() == "nodebench_summary.json"

    @pytest.mark.asyncio
    async def test_export_writes_summary(self, exporter, output_dir: Path, bench_bin: Path):
        path = await exporter.export()

        assert path == output_dir / "nodebench_summary.json"
        data = orjson.loads(path.read_bytes())
        assert data["bench_bin"] == str(bench_bin)
        assert data["num_nodes"] == 3
        assert data["num_processed"] == 2
        assert data["num_successful"] == 1
        assert [n["label"] for n in data["nodes"]] == ["node_0001-gcp", "node_0002-aws"]
        assert data["nodes"][0]["summary"]["fetched"] == 3
        assert data["nodes"][0]["state"] == "done"
        assert data["nodes"][1]["error"] == "quota exceeded"
        assert "generated_at" in data
