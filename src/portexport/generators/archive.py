# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Compressed archive export driven by ``cmake -E tar``."""

from __future__ import annotations

from pathlib import Path

from ..errors import ArtifactGenerationError
from ..models import ARCHIVE_FORMATS, ArchiveFormat, Artifact, ExportFormat
from .base import GeneratorContext, run_tool


def archive_path(output_dir: Path, snapshot_name: str, archive_format: ArchiveFormat) -> Path:
    """Return ``<output_dir>/<snapshot_name>.<extension>``."""

    return output_dir / f"{snapshot_name}.{archive_format.extension}"


def archive_command(cmake_exe: str, output_path: Path, archive_format: ArchiveFormat, source: Path) -> list[str]:
    """Return the archiving command line for ``source``."""

    return [
        cmake_exe,
        "-E",
        "tar",
        "cf",
        str(output_path),
        f"--format={archive_format.tool_format}",
        "--",
        str(source),
    ]


def generate_archive(context: GeneratorContext, kind: ExportFormat) -> Artifact:
    """Archive the whole snapshot tree in the format registered for ``kind``.

    Raises:
        ArtifactGenerationError: If ``kind`` is not an archive format or the
            archiving tool fails.
    """

    archive_format = ARCHIVE_FORMATS.get(kind)
    if archive_format is None:
        raise ArtifactGenerationError(kind.value, "not an archive format")
    output_path = archive_path(context.output_dir, context.snapshot.name, archive_format)
    command = archive_command(context.settings.cmake_exe, output_path, archive_format, context.snapshot.root)
    run_tool(kind, command)
    return Artifact(kind=kind, output_path=output_path)


def generate_zip(context: GeneratorContext) -> Artifact:
    """Produce ``<snapshot>.zip``."""

    return generate_archive(context, ExportFormat.ZIP)


def generate_seven_zip(context: GeneratorContext) -> Artifact:
    """Produce ``<snapshot>.7z``."""

    return generate_archive(context, ExportFormat.SEVEN_ZIP)


__all__ = ["archive_command", "archive_path", "generate_archive", "generate_seven_zip", "generate_zip"]
