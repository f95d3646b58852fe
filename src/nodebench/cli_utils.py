# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import sys
from typing import NoReturn

from rich.console import Console
from rich.panel import Panel

__all__ = ["raise_startup_error_and_exit"]


def raise_startup_error_and_exit(
    message: str,
    title: str = "Startup Error",
    exit_code: int = 1,
    console: Console | None = None,
) -> NoReturn:
    """Print a startup error in a panel and exit the process."""
    console = console or Console(stderr=True)
    console.print(
        Panel(message, title=f"[bold red]{title}[/bold red]", border_style="red", expand=False)
    )
    sys.exit(exit_code)
