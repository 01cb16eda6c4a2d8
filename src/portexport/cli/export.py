# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI command exporting built packages."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ..config import ExportSettings, load_settings
from ..errors import ConfigurationError, ExportError, UnbuiltDependencyError
from ..models import PackageSpec
from ..options import USAGE_EXAMPLE, ExportOption, validate_export_options
from ..pipeline import ExportPipeline
from ..plan import FilesystemPlanResolver
from .shared import CLILogger, build_cli_logger


def _resolve_specs(
    raw_specs: list[str],
    *,
    include_installed: bool,
    settings: ExportSettings,
    resolver: FilesystemPlanResolver,
) -> list[PackageSpec]:
    """Parse ``raw_specs`` and optionally add every installed package.

    Raises:
        ConfigurationError: If no spec remains or a spec names an unknown triplet.
    """

    specs = [PackageSpec.parse(text, settings.default_triplet) for text in raw_specs]
    if include_installed:
        specs.extend(resolver.installed_specs())
    if not specs:
        raise ConfigurationError("no packages specified; pass package specs or --all", usage=USAGE_EXAMPLE)
    for triplet in sorted({spec.triplet for spec in specs}):
        resolver.check_triplet(triplet)
    return sorted(set(specs))


def _report_failure(exc: ExportError, logger: CLILogger) -> None:
    logger.fail(str(exc))
    if isinstance(exc, UnbuiltDependencyError):
        logger.echo(f"To build them, run:\n    {exc.command}")
    elif isinstance(exc, ConfigurationError) and exc.usage:
        logger.echo(exc.usage)


def export_command(
    specs: Annotated[
        list[str] | None,
        typer.Argument(metavar="SPEC...", help="Packages to export as <name>[:<triplet>]."),
    ] = None,
    all_installed: Annotated[bool, typer.Option("--all", help="Export every already-built package.")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the plan and exit.")] = False,
    raw: Annotated[bool, typer.Option("--raw", help="Keep the staging directory as the export.")] = False,
    nuget: Annotated[bool, typer.Option("--nuget", help="Create a NuGet package.")] = False,
    ifw: Annotated[bool, typer.Option("--ifw", help="Create a Qt Installer Framework installer.")] = False,
    zip_archive: Annotated[bool, typer.Option("--zip", help="Create a zip archive.")] = False,
    seven_zip: Annotated[bool, typer.Option("--7zip", help="Create a 7zip archive.")] = False,
    nuget_id: Annotated[str | None, typer.Option("--nuget-id", help="NuGet package id.")] = None,
    nuget_version: Annotated[str | None, typer.Option("--nuget-version", help="NuGet package version.")] = None,
    ifw_repository_url: Annotated[
        str | None,
        typer.Option("--ifw-repository-url", help="Publish an online IFW repository for this URL."),
    ] = None,
    ifw_packages_dir: Annotated[
        str | None,
        typer.Option("--ifw-packages-directory-path", help="IFW packages directory."),
    ] = None,
    ifw_repository_dir: Annotated[
        str | None,
        typer.Option("--ifw-repository-directory-path", help="IFW repository directory."),
    ] = None,
    ifw_config_file: Annotated[
        str | None,
        typer.Option("--ifw-configuration-file-path", help="IFW configuration file."),
    ] = None,
    ifw_installer_file: Annotated[
        str | None,
        typer.Option("--ifw-installer-file-path", help="IFW installer output file."),
    ] = None,
    root: Annotated[
        Path | None,
        typer.Option("--root", file_okay=False, help="Source tree root (defaults to PORTEXPORT_ROOT or cwd)."),
    ] = None,
    emoji: Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji in output.")] = True,
) -> None:
    """Export built packages as a directory, NuGet package, archive or installer.

    Raises:
        typer.Exit: Always raised to terminate the command with an exit status.
    """

    logger = build_cli_logger(emoji=emoji)
    switches = {
        ExportOption.DRY_RUN: dry_run,
        ExportOption.RAW: raw,
        ExportOption.NUGET: nuget,
        ExportOption.IFW: ifw,
        ExportOption.ZIP: zip_archive,
        ExportOption.SEVEN_ZIP: seven_zip,
    }
    settings_map = {
        ExportOption.NUGET_ID: nuget_id,
        ExportOption.NUGET_VERSION: nuget_version,
        ExportOption.IFW_REPOSITORY_URL: ifw_repository_url,
        ExportOption.IFW_PACKAGES_DIR_PATH: ifw_packages_dir,
        ExportOption.IFW_REPOSITORY_DIR_PATH: ifw_repository_dir,
        ExportOption.IFW_CONFIG_FILE_PATH: ifw_config_file,
        ExportOption.IFW_INSTALLER_FILE_PATH: ifw_installer_file,
    }
    try:
        # Options are validated before the source tree is read.
        request = validate_export_options((), switches, settings_map)
        settings = load_settings(root)
        resolver = FilesystemPlanResolver(settings)
        requested = _resolve_specs(
            list(specs or []),
            include_installed=all_installed,
            settings=settings,
            resolver=resolver,
        )
        pipeline = ExportPipeline(settings, resolver, logger=logger)
        pipeline.run(request.model_copy(update={"specs": tuple(requested)}))
    except ExportError as exc:
        _report_failure(exc, logger)
        raise typer.Exit(code=exc.exit_code) from exc
    raise typer.Exit(code=0)


__all__ = ["export_command"]
