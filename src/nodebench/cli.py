# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line entry point."""

import sys
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter

from nodebench import __version__

app = App(
    name="nodebench",
    help="Provision remote nodes, run a benchmark on each and fetch its result files.",
    version=__version__,
)


@app.default
def run(
    cfg: Annotated[Path, Parameter(name=["--cfg", "-c"], help="Node config (JSON array)")],
    bench_bin: Annotated[
        Path, Parameter(name=["--bench-bin", "-b"], help="Location of the bench binary to copy")
    ],
    script: Annotated[
        Path, Parameter(name=["--script", "-s"], help="Location of the experiment script to copy")
    ],
    *,
    output_dir: Annotated[
        Path, Parameter(help="Directory for <tag>.log, exp-*.data and the run summary")
    ] = Path("."),
    continue_on_error: Annotated[
        bool, Parameter(help="Keep processing the remaining nodes after a node fails")
    ] = False,
    pause_after_connect: Annotated[
        bool, Parameter(help="Wait for enter once a node is set up, before the experiment")
    ] = False,
    pause_after_collect: Annotated[
        bool, Parameter(help="Wait for enter after results are fetched, before teardown")
    ] = False,
    launch_timeout: Annotated[
        float | None, Parameter(help="Seconds a node may take to become reachable (overrides provider default)")
    ] = None,
    summary: Annotated[bool, Parameter(help="Write nodebench_summary.json")] = True,
    log_level: Annotated[str, Parameter(help="Log level (TRACE, DEBUG, INFO, WARNING, ERROR)")] = "INFO",
) -> None:
    """Run the experiment on every configured node, in order."""
    from nodebench.cli_runner import run_nodes
    from nodebench.common.config import RunOptions

    options = RunOptions(
        output_dir=output_dir,
        continue_on_error=continue_on_error,
        pause_after_connect=pause_after_connect,
        pause_after_collect=pause_after_collect,
        launch_timeout=launch_timeout,
        write_summary=summary,
    )
    sys.exit(run_nodes(cfg, bench_bin, script, options, log_level=log_level))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
