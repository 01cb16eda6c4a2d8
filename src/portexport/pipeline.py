# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Export pipeline driver: classify, stage, generate, clean up."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Final, Protocol

from .config import ExportSettings
from .constants import CMAKE_TOOLCHAIN_FILE
from .errors import UnbuiltDependencyError
from .generators import SNAPSHOT_GENERATORS, GeneratorContext, IfwInstallerGenerator, InstallerGenerator
from .generators.ifw import INSTALLER_TARGET_DIR
from .models import ARCHIVE_FORMATS, Artifact, ExportFormat, ExportRequest, PackageSpec, StagingSnapshot
from .options import ExportOption, validate_export_options
from .plan import AUTO_SELECTED_WARNING, PlanReport, PlanResolver, classify_plan, ensure_buildable, render_plan
from .session import create_export_id
from .staging import StagingManager, remove_tree

LOGGER = logging.getLogger(__name__)

ARCHIVE_PREFIX_PLACEHOLDER: Final[str] = "[...]"


class PipelineState(Enum):
    """States visited by a single export invocation."""

    VALIDATING = "validating"
    CLASSIFYING = "classifying"
    ABORTED = "aborted"
    DRY_RUN_DONE = "dry-run-done"
    STAGING = "staging"
    GENERATING = "generating"
    CLEANING_UP = "cleaning-up"
    DONE = "done"


class ProgressLogger(Protocol):
    """Operator-facing output used by the pipeline."""

    def echo(self, message: str) -> None:
        """Write ``message`` verbatim."""

    def info(self, message: str) -> None:
        """Report progress."""

    def ok(self, message: str) -> None:
        """Report success."""

    def warn(self, message: str) -> None:
        """Report a non-fatal problem."""


@dataclass(slots=True)
class ExportSummary:
    """Outcome of one pipeline invocation."""

    request: ExportRequest | None = None
    report: PlanReport | None = None
    session_id: str | None = None
    snapshot_path: Path | None = None
    artifacts: list[Artifact] = field(default_factory=list)
    states: list[PipelineState] = field(default_factory=list)

    def enter(self, state: PipelineState) -> None:
        """Record a transition into ``state``."""

        LOGGER.debug("pipeline state=%s", state.value)
        self.states.append(state)

    @property
    def state(self) -> PipelineState | None:
        """Return the most recently entered state."""

        return self.states[-1] if self.states else None


def cmake_next_step(prefix: str) -> str:
    """Return guidance for consuming an export from CMake."""

    toolchain = f"{prefix}/{CMAKE_TOOLCHAIN_FILE.as_posix()}"
    return f'\nTo use the exported libraries in CMake projects use:\n    "-DCMAKE_TOOLCHAIN_FILE={toolchain}"\n'


def nuget_next_step(package_id: str, source_dir: Path) -> str:
    """Return guidance for installing an exported NuGet package."""

    return (
        "\nWith a project open, go to Tools->NuGet Package Manager->Package Manager Console and paste:\n"
        f'    Install-Package {package_id} -Source "{source_dir}"\n'
    )


_PROGRESS_LABELS: Final[dict[ExportFormat, str]] = {
    ExportFormat.NUGET: "Creating nuget package",
    ExportFormat.ZIP: "Creating zip archive",
    ExportFormat.SEVEN_ZIP: "Creating 7zip archive",
    ExportFormat.IFW: "Creating IFW installer",
}


class ExportPipeline:
    """Sequence validation, classification, staging and artifact generation."""

    def __init__(
        self,
        settings: ExportSettings,
        resolver: PlanResolver,
        *,
        logger: ProgressLogger,
        installer: InstallerGenerator | None = None,
        session_factory: Callable[[], str] = create_export_id,
    ) -> None:
        self._settings = settings
        self._resolver = resolver
        self._logger = logger
        self._installer = installer or IfwInstallerGenerator(settings)
        self._session_factory = session_factory
        self._summary = ExportSummary()

    @property
    def summary(self) -> ExportSummary:
        """Return the summary of the most recent invocation, even a failed one."""

        return self._summary

    def execute(
        self,
        specs: Iterable[PackageSpec],
        switches: Mapping[ExportOption | str, bool],
        settings: Mapping[ExportOption | str, str | None] | None = None,
    ) -> ExportSummary:
        """Validate raw CLI input and run the pipeline.

        Raises:
            ConfigurationError: If validation fails; nothing touches the filesystem.
        """

        self._summary = ExportSummary()
        self._summary.enter(PipelineState.VALIDATING)
        request = validate_export_options(specs, switches, settings)
        return self._run(request)

    def run(self, request: ExportRequest) -> ExportSummary:
        """Run the pipeline for an already validated ``request``."""

        self._summary = ExportSummary()
        self._summary.enter(PipelineState.VALIDATING)
        return self._run(request)

    def _run(self, request: ExportRequest) -> ExportSummary:
        summary = self._summary
        summary.request = request

        summary.enter(PipelineState.CLASSIFYING)
        plan = self._resolver.resolve(request.specs)
        report = classify_plan(plan)
        summary.report = report
        self._print_plan(report)
        try:
            ensure_buildable(report, install_command=self._settings.install_command)
        except UnbuiltDependencyError:
            summary.enter(PipelineState.ABORTED)
            raise

        if request.dry_run:
            summary.enter(PipelineState.DRY_RUN_DONE)
            return summary

        session_id = self._session_factory()
        summary.session_id = session_id
        staging = StagingManager(
            self._settings,
            on_package=lambda name: self._logger.info(f"Exporting package {name}... "),
            on_package_done=lambda name: self._logger.ok(f"Exporting package {name}... done"),
        )
        snapshot: StagingSnapshot | None = None
        try:
            if request.needs_snapshot:
                summary.enter(PipelineState.STAGING)
                summary.snapshot_path = staging.snapshot_path(session_id)
                snapshot = staging.stage(plan, session_id)

            summary.enter(PipelineState.GENERATING)
            if snapshot is not None:
                self._generate_from_snapshot(request, snapshot, summary)
            if request.wants(ExportFormat.IFW):
                self._logger.info(f"{_PROGRESS_LABELS[ExportFormat.IFW]}... ")
                artifact = self._installer.generate(plan, session_id, request.ifw)
                self._logger.ok(f"{_PROGRESS_LABELS[ExportFormat.IFW]}... done")
                self._announce(artifact)
                summary.artifacts.append(artifact)
        finally:
            if PipelineState.STAGING in summary.states or PipelineState.GENERATING in summary.states:
                summary.enter(PipelineState.CLEANING_UP)
                self._cleanup(summary.snapshot_path, keep=snapshot is not None and request.wants(ExportFormat.RAW))

        summary.enter(PipelineState.DONE)
        return summary

    def _generate_from_snapshot(
        self,
        request: ExportRequest,
        snapshot: StagingSnapshot,
        summary: ExportSummary,
    ) -> None:
        context = GeneratorContext(
            snapshot=snapshot,
            output_dir=self._settings.require("export_root"),
            request=request,
            settings=self._settings,
        )
        for kind, generator in SNAPSHOT_GENERATORS.items():
            if not request.wants(kind):
                continue
            label = _PROGRESS_LABELS.get(kind)
            if label:
                self._logger.info(f"{label}... ")
            artifact = generator(context)
            if label:
                self._logger.ok(f"{label}... done")
            self._announce(artifact)
            summary.artifacts.append(artifact)

    def _announce(self, artifact: Artifact) -> None:
        path = artifact.output_path
        if artifact.kind is ExportFormat.RAW:
            self._logger.ok(f'Files exported at: "{path.as_posix()}"')
            self._logger.echo(cmake_next_step(path.as_posix()))
        elif artifact.kind is ExportFormat.NUGET:
            self._logger.ok(f"NuGet package exported at: {path.as_posix()}")
            package_id = path.name.removesuffix(".nupkg")
            self._logger.echo(nuget_next_step(package_id, path.parent))
        elif artifact.kind in ARCHIVE_FORMATS:
            label = ARCHIVE_FORMATS[artifact.kind].label
            self._logger.ok(f"{label} archive exported at: {path.as_posix()}")
            self._logger.echo(cmake_next_step(ARCHIVE_PREFIX_PLACEHOLDER))
        elif artifact.kind is ExportFormat.IFW:
            self._logger.ok(f"IFW installer exported at: {path.as_posix()}")
            self._logger.echo(cmake_next_step(INSTALLER_TARGET_DIR))

    def _print_plan(self, report: PlanReport) -> None:
        for block in render_plan(report):
            self._logger.echo(block)
        if report.has_auto_selected:
            self._logger.warn(AUTO_SELECTED_WARNING)

    def _cleanup(self, snapshot_path: Path | None, *, keep: bool) -> None:
        if snapshot_path is None or keep:
            return
        try:
            remove_tree(snapshot_path)
        except OSError as exc:
            LOGGER.warning("unable to remove staging directory %s: %s", snapshot_path, exc)
            self._logger.warn(f"Unable to remove staging directory {snapshot_path}: {exc}")


__all__ = [
    "ExportPipeline",
    "ExportSummary",
    "PipelineState",
    "ProgressLogger",
    "cmake_next_step",
    "nuget_next_step",
]
