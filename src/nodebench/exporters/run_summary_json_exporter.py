# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporter for the per-node summary of a batch."""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import orjson

from nodebench.common.config import RunConfig
from nodebench.orchestrator.models import NodeRunResult

__all__ = ["RunSummaryExporterConfig", "RunSummaryJsonExporter"]


@dataclass(slots=True)
class RunSummaryExporterConfig:
    """Configuration for the run summary exporter.

    Attributes:
        run_config: Configuration the batch ran with
        results: One result per processed node
        output_dir: Directory where the summary is written
    """

    run_config: RunConfig
    results: list[NodeRunResult]
    output_dir: Path


class RunSummaryJsonExporter:
    """Writes nodebench_summary.json.

    Output structure:
    {
        "generated_at": "...",
        "bench_bin": "...",
        "script": "...",
        "num_nodes": 2,
        "num_processed": 2,
        "num_successful": 1,
        "nodes": [NodeRunResult, ...]
    }
    """

    def __init__(self, config: RunSummaryExporterConfig) -> None:
        self._config = config

    def get_file_name(self) -> str:
        return "nodebench_summary.json"

    def _generate_content(self) -> bytes:
        results = self._config.results
        output = {
            "generated_at": datetime.now(timezone.utc).isoformat(),
            "bench_bin": str(self._config.run_config.bench_bin),
            "script": str(self._config.run_config.script),
            "num_nodes": len(self._config.run_config.nodes),
            "num_processed": len(results),
            "num_successful": sum(1 for r in results if r.success),
            "nodes": [r.model_dump(mode="json") for r in results],
        }
        return orjson.dumps(output, option=orjson.OPT_INDENT_2)

    async def export(self) -> Path:
        """Write the summary file and return its path."""
        path = Path(self._config.output_dir) / self.get_file_name()
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_bytes, self._generate_content())
        return path
