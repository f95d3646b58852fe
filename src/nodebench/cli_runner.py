# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from nodebench.cli_utils import raise_startup_error_and_exit
from nodebench.common.config import RunConfig, RunOptions
from nodebench.common.exceptions import ConfigurationError, PreflightError

if TYPE_CHECKING:
    from nodebench.orchestrator.models import NodeRunResult

logger = logging.getLogger(__name__)


def run_nodes(
    cfg: Path,
    bench_bin: Path,
    script: Path,
    options: RunOptions | None = None,
    log_level: str = "INFO",
) -> int:
    """Run the configured batch and return the process exit code.

    Logging is set up here, once, and torn down on the way out.
    """
    from nodebench.common.logging import setup_rich_logging, teardown_logging

    setup_rich_logging(log_level)
    try:
        return _run_batch(cfg, bench_bin, script, options or RunOptions())
    finally:
        teardown_logging()


def load_run_config(cfg: Path, bench_bin: Path, script: Path) -> RunConfig:
    """Load the run configuration, exiting with a startup error if it is unusable.

    Nothing remote has happened at this point, so exiting is always safe.
    """
    try:
        return RunConfig.load(cfg, bench_bin, script)
    except PreflightError as e:
        raise_startup_error_and_exit(str(e), title="Missing Local File")
    except ConfigurationError as e:
        raise_startup_error_and_exit(str(e), title="Configuration Error")


def _run_batch(cfg: Path, bench_bin: Path, script: Path, options: RunOptions) -> int:
    from nodebench.orchestrator import (
        AutoContinueCheckpoint,
        BatchOrchestrator,
        NodeOrchestrator,
        StdinCheckpoint,
    )

    logger.info(f"starting: cfg={cfg} bench_bin={bench_bin} script={script}")
    run_config = load_run_config(cfg, bench_bin, script)

    if not run_config.nodes:
        logger.warning(f"{cfg} lists no nodes, nothing to do")
        return 0

    pauses = options.pause_after_connect or options.pause_after_collect
    checkpoint = StdinCheckpoint() if pauses else AutoContinueCheckpoint()
    orchestrator = BatchOrchestrator(
        run_config,
        options,
        NodeOrchestrator(run_config, options, checkpoint=checkpoint),
    )

    try:
        results = asyncio.run(_execute(orchestrator, run_config, options))
    except KeyboardInterrupt:
        logger.error("interrupted by user")
        return 130

    return _exit_code(run_config, results)


async def _execute(orchestrator, run_config: RunConfig, options: RunOptions) -> list["NodeRunResult"]:
    from nodebench.exporters import RunSummaryExporterConfig, RunSummaryJsonExporter

    results = await orchestrator.execute()

    if options.write_summary:
        exporter = RunSummaryJsonExporter(
            RunSummaryExporterConfig(
                run_config=run_config, results=results, output_dir=options.output_dir
            )
        )
        path = await exporter.export()
        logger.info(f"Run summary written to: {path}")

    return results


def _exit_code(run_config: RunConfig, results: list["NodeRunResult"]) -> int:
    failed = [r for r in results if not r.success]
    skipped = len(run_config.nodes) - len(results)

    logger.info("=" * 80)
    for r in results:
        counts = (
            f"{r.summary.fetched}/{r.summary.considered} result files"
            if r.summary is not None
            else "no results collected"
        )
        status = "ok" if r.success else f"FAILED ({r.state.value})"
        logger.info(f"  {r.label}: {status}, {counts}")
    if skipped:
        logger.warning(f"  {skipped} node(s) not processed")
    logger.info("=" * 80)

    if failed:
        for r in failed:
            logger.error(f"{r.label}: {r.error}")
        return 1
    return 0
