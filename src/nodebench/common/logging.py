# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Process-wide logging setup.

Call ``setup_rich_logging`` once at startup and ``teardown_logging`` on exit.
Nothing below the CLI layer touches handlers.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_handler: RichHandler | None = None


def setup_rich_logging(level: str | int = "INFO") -> None:
    """Install a RichHandler on the root logger. Repeated calls only change the level."""
    global _handler

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    if _handler is None:
        _handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            log_time_format="[%X]",
        )
        root.addHandler(_handler)
    _handler.setLevel(level)

    # paramiko logs every channel open at INFO
    logging.getLogger("paramiko").setLevel(max(level, logging.WARNING))
    logging.getLogger("botocore").setLevel(max(level, logging.WARNING))


def teardown_logging() -> None:
    """Remove the handler installed by setup_rich_logging."""
    global _handler

    if _handler is not None:
        logging.getLogger().removeHandler(_handler)
        _handler.close()
        _handler = None
