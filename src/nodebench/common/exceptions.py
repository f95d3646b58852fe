# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exception hierarchy for nodebench.

Everything raised on purpose derives from NodeBenchError so the CLI can tell
expected failures apart from bugs.
"""


class NodeBenchError(Exception):
    """Base class for all nodebench errors."""


class ConfigurationError(NodeBenchError):
    """Configuration could not be parsed or names an invalid region/address."""


class PreflightError(ConfigurationError):
    """A local file required before provisioning is missing."""


class LaunchError(NodeBenchError):
    """A provider could not bring the node up."""


class LaunchTimeoutError(LaunchError):
    """The node did not become reachable within the launch timeout."""


class ProviderAPIError(LaunchError):
    """The provider control plane rejected or failed a request."""


class SetupError(NodeBenchError):
    """One-time remote configuration of a node failed."""


class InstallError(SetupError):
    """Dependency installation kept failing after every retry."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class RemoteTransportError(NodeBenchError):
    """The remote session failed for a reason other than a missing file."""


class RunError(NodeBenchError):
    """The experiment driver could not be executed on the node."""


class TerminateError(NodeBenchError):
    """Provisioned resources could not be released and may still be billing."""
