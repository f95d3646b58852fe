# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exporters for batch results."""

from nodebench.exporters.run_summary_json_exporter import (
    RunSummaryExporterConfig,
    RunSummaryJsonExporter,
)

__all__ = [
    "RunSummaryExporterConfig",
    "RunSummaryJsonExporter",
]
