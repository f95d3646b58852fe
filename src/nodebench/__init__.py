# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""nodebench - provision remote nodes, run a benchmark on them, fetch results."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("nodebench")
except PackageNotFoundError:
    __version__ = "unknown"
