# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception hierarchy raised by the export pipeline."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .models import PackageSpec


class ExportError(RuntimeError):
    """Base class for failures that end an export with a non-zero status."""

    def __init__(self, message: str, *, exit_code: int = 1) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the operator.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


class ConfigurationError(ExportError):
    """Raised when command-line input is missing or contradictory."""

    def __init__(self, message: str, *, usage: str | None = None) -> None:
        super().__init__(message)
        self.usage = usage


class UnbuiltDependencyError(ExportError):
    """Raised when the export plan still contains packages that must be built."""

    def __init__(self, specs: Sequence[PackageSpec], *, command: str) -> None:
        super().__init__("There are packages that have not been built.")
        self.specs = tuple(specs)
        self.command = command


class StagingError(ExportError):
    """Raised when the staging snapshot cannot be assembled."""


class ArtifactGenerationError(ExportError):
    """Raised when an artifact generator or its external tool fails."""

    def __init__(self, kind: str, message: str) -> None:
        super().__init__(f"{kind}: {message}")
        self.kind = kind


class SessionIdentifierError(RuntimeError):
    """Raised when the export session identifier cannot be formatted.

    This is intentionally not an :class:`ExportError`; the CLI lets it
    propagate and terminate the process.
    """


__all__ = [
    "ArtifactGenerationError",
    "ConfigurationError",
    "ExportError",
    "SessionIdentifierError",
    "StagingError",
    "UnbuiltDependencyError",
]
