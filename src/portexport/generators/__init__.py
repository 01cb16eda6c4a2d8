# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Artifact generators keyed by export format."""

from __future__ import annotations

from typing import Final

from ..models import ExportFormat
from .archive import generate_seven_zip, generate_zip
from .base import GeneratorContext, SnapshotGenerator
from .ifw import IfwInstallerGenerator, InstallerGenerator
from .nuget import generate_nuget
from .raw import generate_raw

# Snapshot-based generators in the order the pipeline runs them.
SNAPSHOT_GENERATORS: Final[dict[ExportFormat, SnapshotGenerator]] = {
    ExportFormat.RAW: generate_raw,
    ExportFormat.NUGET: generate_nuget,
    ExportFormat.ZIP: generate_zip,
    ExportFormat.SEVEN_ZIP: generate_seven_zip,
}

__all__ = [
    "SNAPSHOT_GENERATORS",
    "GeneratorContext",
    "IfwInstallerGenerator",
    "InstallerGenerator",
    "SnapshotGenerator",
]
