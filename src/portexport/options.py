# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Option schema and consistency validation for export requests."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Final

from pydantic import BaseModel, ValidationError

from .errors import ConfigurationError
from .models import ExportFormat, ExportRequest, IfwOptions, NugetOptions, PackageSpec


class ExportOption(StrEnum):
    """Every switch and setting understood by the export command."""

    DRY_RUN = "--dry-run"
    RAW = "--raw"
    NUGET = "--nuget"
    IFW = "--ifw"
    ZIP = "--zip"
    SEVEN_ZIP = "--7zip"
    NUGET_ID = "--nuget-id"
    NUGET_VERSION = "--nuget-version"
    IFW_REPOSITORY_URL = "--ifw-repository-url"
    IFW_PACKAGES_DIR_PATH = "--ifw-packages-directory-path"
    IFW_REPOSITORY_DIR_PATH = "--ifw-repository-directory-path"
    IFW_CONFIG_FILE_PATH = "--ifw-configuration-file-path"
    IFW_INSTALLER_FILE_PATH = "--ifw-installer-file-path"


FORMAT_SWITCHES: Final[dict[ExportOption, ExportFormat]] = {
    ExportOption.RAW: ExportFormat.RAW,
    ExportOption.NUGET: ExportFormat.NUGET,
    ExportOption.IFW: ExportFormat.IFW,
    ExportOption.ZIP: ExportFormat.ZIP,
    ExportOption.SEVEN_ZIP: ExportFormat.SEVEN_ZIP,
}


@dataclass(frozen=True, slots=True)
class FormatSettings:
    """Settings owned by one format family and the switch that enables them."""

    owner: ExportOption
    request_field: str
    model: type[BaseModel]
    fields: Mapping[ExportOption, str]


# Settings imply their owning switch; new format families register a row here.
FORMAT_SETTINGS: Final[dict[ExportFormat, FormatSettings]] = {
    ExportFormat.NUGET: FormatSettings(
        owner=ExportOption.NUGET,
        request_field="nuget",
        model=NugetOptions,
        fields={
            ExportOption.NUGET_ID: "package_id",
            ExportOption.NUGET_VERSION: "version",
        },
    ),
    ExportFormat.IFW: FormatSettings(
        owner=ExportOption.IFW,
        request_field="ifw",
        model=IfwOptions,
        fields={
            ExportOption.IFW_REPOSITORY_URL: "repository_url",
            ExportOption.IFW_PACKAGES_DIR_PATH: "packages_dir",
            ExportOption.IFW_REPOSITORY_DIR_PATH: "repository_dir",
            ExportOption.IFW_CONFIG_FILE_PATH: "config_file",
            ExportOption.IFW_INSTALLER_FILE_PATH: "installer_file",
        },
    ),
}

USAGE_EXAMPLE: Final[str] = "Example:\n  portexport export zlib zlib:x64-windows boost --nuget\n"


def _coerce_option(key: ExportOption | str) -> ExportOption:
    try:
        return ExportOption(key)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown export option: {key}", usage=USAGE_EXAMPLE) from exc


def _enabled_switches(switches: Mapping[ExportOption | str, bool]) -> set[ExportOption]:
    return {_coerce_option(key) for key, enabled in switches.items() if enabled}


def _present_settings(settings: Mapping[ExportOption | str, str | None]) -> dict[ExportOption, str]:
    present: dict[ExportOption, str] = {}
    for key, value in settings.items():
        option = _coerce_option(key)
        if value is None or not str(value).strip():
            continue
        present[option] = str(value).strip()
    return present


def _collect_format_options(
    enabled: set[ExportOption],
    settings: dict[ExportOption, str],
) -> dict[str, BaseModel]:
    """Apply the "settings imply their parent flag" rule to every format family."""

    collected: dict[str, BaseModel] = {}
    claimed: set[ExportOption] = set()
    for table in FORMAT_SETTINGS.values():
        supplied = {option: value for option, value in settings.items() if option in table.fields}
        claimed.update(supplied)
        if table.owner not in enabled:
            if supplied:
                offending = next(option for option in table.fields if option in supplied)
                raise ConfigurationError(f"{offending} is only valid with {table.owner}", usage=USAGE_EXAMPLE)
            continue
        payload = {table.fields[option]: value for option, value in supplied.items()}
        try:
            collected[table.request_field] = table.model.model_validate(payload)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid {table.owner} settings: {exc}", usage=USAGE_EXAMPLE) from exc

    unclaimed = sorted(set(settings) - claimed)
    if unclaimed:
        raise ConfigurationError(f"{unclaimed[0]} is not a setting", usage=USAGE_EXAMPLE)
    return collected


def validate_export_options(
    specs: Iterable[PackageSpec],
    switches: Mapping[ExportOption | str, bool],
    settings: Mapping[ExportOption | str, str | None] | None = None,
) -> ExportRequest:
    """Return a validated :class:`ExportRequest` built from parsed CLI input.

    Args:
        specs: Package specs to export.
        switches: Switch name to enabled flag.
        settings: Setting name to value; ``None`` or blank values count as unset.

    Returns:
        ExportRequest: Immutable request consumed by the pipeline.

    Raises:
        ConfigurationError: If no export target is selected or a setting is
            supplied without its owning switch.
    """

    enabled = _enabled_switches(switches)
    formats = frozenset(FORMAT_SWITCHES[option] for option in enabled if option in FORMAT_SWITCHES)
    dry_run = ExportOption.DRY_RUN in enabled
    if not formats and not dry_run:
        targets = " ".join(str(option) for option in FORMAT_SWITCHES)
        raise ConfigurationError(
            f"no export target specified; provide at least one export type: {targets}",
            usage=USAGE_EXAMPLE,
        )

    format_options = _collect_format_options(enabled, _present_settings(settings or {}))
    return ExportRequest(
        specs=tuple(specs),
        formats=formats,
        dry_run=dry_run,
        **format_options,
    )


__all__ = [
    "FORMAT_SETTINGS",
    "FORMAT_SWITCHES",
    "USAGE_EXAMPLE",
    "ExportOption",
    "FormatSettings",
    "validate_export_options",
]
