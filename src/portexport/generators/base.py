# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared contract for artifact generators."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..config import ExportSettings
from ..errors import ArtifactGenerationError
from ..models import Artifact, ExportFormat, ExportRequest, StagingSnapshot
from ..process_utils import SubprocessExecutionError, run_command


@dataclass(frozen=True, slots=True)
class GeneratorContext:
    """Inputs handed to a snapshot-based generator.

    Generators treat ``snapshot`` as read-only and write only their own
    artifact below ``output_dir``.
    """

    snapshot: StagingSnapshot
    output_dir: Path
    request: ExportRequest
    settings: ExportSettings


SnapshotGenerator = Callable[[GeneratorContext], Artifact]


def run_tool(kind: ExportFormat, args: Sequence[str]) -> None:
    """Run an external packaging tool once, translating failures.

    Raises:
        ArtifactGenerationError: If the tool is missing, cannot be started or
            exits non-zero.
    """

    try:
        run_command(args)
    except OSError as exc:
        raise ArtifactGenerationError(kind.value, f"unable to run {args[0]}: {exc}") from exc
    except SubprocessExecutionError as exc:
        raise ArtifactGenerationError(kind.value, str(exc)) from exc


__all__ = ["GeneratorContext", "SnapshotGenerator", "run_tool"]
