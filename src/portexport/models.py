# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the portexport package."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum, StrEnum
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

_SPEC_PART_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z0-9]+(?:[-_.][a-z0-9]+)*$")


@dataclass(frozen=True, slots=True, order=True)
class PackageSpec:
    """Identify a package instance built for a single target triplet."""

    name: str
    triplet: str

    def __str__(self) -> str:
        return f"{self.name}:{self.triplet}"

    @property
    def dir_name(self) -> str:
        """Return the ``<name>_<triplet>`` directory name used by package trees."""

        return f"{self.name}_{self.triplet}"

    @classmethod
    def parse(cls, text: str, default_triplet: str) -> PackageSpec:
        """Parse ``name`` or ``name:triplet`` into a :class:`PackageSpec`.

        Args:
            text: Raw spec supplied by the operator.
            default_triplet: Triplet applied when ``text`` omits one.

        Returns:
            PackageSpec: Normalised, lower-cased specification.

        Raises:
            ConfigurationError: If ``text`` is empty or malformed.
        """

        raw = text.strip().lower()
        name, sep, triplet = raw.partition(":")
        if not sep:
            triplet = default_triplet.strip().lower()
        if not _SPEC_PART_RE.match(name) or not _SPEC_PART_RE.match(triplet):
            raise ConfigurationError(f"Invalid package spec: '{text}'. Expected <name>[:<triplet>].")
        return cls(name=name, triplet=triplet)


class PlanStatus(Enum):
    """Build status of a package as reported by the plan resolver."""

    ALREADY_BUILT = "already-built"
    NEEDS_BUILD = "needs-build"


class RequestOrigin(Enum):
    """Why a package appears in the export plan."""

    USER_REQUESTED = "user-requested"
    AUTO_SELECTED = "auto-selected"


@dataclass(frozen=True, slots=True)
class BuiltPackage:
    """Metadata describing an already-built package directory."""

    spec: PackageSpec
    version: str
    package_dir: Path
    depends: tuple[PackageSpec, ...] = ()

    @property
    def fullstem(self) -> str:
        """Return ``<name>_<version>_<triplet>`` used to name listfiles."""

        return f"{self.spec.name}_{self.version}_{self.spec.triplet}"


@dataclass(frozen=True, slots=True)
class PlanEntry:
    """One package's export status within a resolved plan."""

    spec: PackageSpec
    status: PlanStatus
    origin: RequestOrigin
    built: BuiltPackage | None = None

    def __post_init__(self) -> None:
        if (self.status is PlanStatus.ALREADY_BUILT) != (self.built is not None):
            raise ValueError(f"{self.spec}: built metadata is only valid for already-built entries")

    @property
    def user_requested(self) -> bool:
        """Return ``True`` when the operator asked for this package directly."""

        return self.origin is RequestOrigin.USER_REQUESTED


class ExportFormat(StrEnum):
    """Artifact formats the pipeline can produce."""

    RAW = "raw"
    NUGET = "nuget"
    ZIP = "zip"
    SEVEN_ZIP = "7zip"
    IFW = "ifw"


@dataclass(frozen=True, slots=True)
class ArchiveFormat:
    """Describe how an archive format maps onto the archiving tool."""

    kind: ExportFormat
    extension: str
    tool_format: str
    label: str


ARCHIVE_FORMATS: Final[dict[ExportFormat, ArchiveFormat]] = {
    ExportFormat.ZIP: ArchiveFormat(ExportFormat.ZIP, "zip", "zip", "Zip"),
    ExportFormat.SEVEN_ZIP: ArchiveFormat(ExportFormat.SEVEN_ZIP, "7z", "7zip", "7zip"),
}

# Formats produced from the shared staging snapshot.
SNAPSHOT_FORMATS: Final[frozenset[ExportFormat]] = frozenset(
    {ExportFormat.RAW, ExportFormat.NUGET, *ARCHIVE_FORMATS},
)


class NugetOptions(BaseModel):
    """Settings owned by the NuGet package format."""

    model_config = ConfigDict(frozen=True)

    package_id: str | None = None
    version: str | None = None


class IfwOptions(BaseModel):
    """Settings owned by the IFW installer format."""

    model_config = ConfigDict(frozen=True)

    repository_url: str | None = None
    packages_dir: Path | None = None
    repository_dir: Path | None = None
    config_file: Path | None = None
    installer_file: Path | None = None


class ExportRequest(BaseModel):
    """Validated description of what a single export invocation produces."""

    model_config = ConfigDict(frozen=True)

    specs: tuple[PackageSpec, ...] = Field(default_factory=tuple)
    formats: frozenset[ExportFormat] = Field(default_factory=frozenset)
    dry_run: bool = False
    nuget: NugetOptions = Field(default_factory=NugetOptions)
    ifw: IfwOptions = Field(default_factory=IfwOptions)

    def wants(self, export_format: ExportFormat) -> bool:
        """Return ``True`` when ``export_format`` was requested."""

        return export_format in self.formats

    @property
    def archive_formats(self) -> tuple[ArchiveFormat, ...]:
        """Return the requested archive formats in registry order."""

        return tuple(fmt for kind, fmt in ARCHIVE_FORMATS.items() if kind in self.formats)

    @property
    def needs_snapshot(self) -> bool:
        """Return ``True`` when any requested format consumes the staging snapshot."""

        return bool(self.formats & SNAPSHOT_FORMATS)


@dataclass(frozen=True, slots=True)
class StagingSnapshot:
    """Directory tree assembled for one export session."""

    root: Path
    session_id: str

    @property
    def installed_dir(self) -> Path:
        """Return the subtree holding every exported package's files."""

        return self.root / "installed"

    @property
    def name(self) -> str:
        """Return the snapshot directory's base name."""

        return self.root.name


@dataclass(frozen=True, slots=True)
class Artifact:
    """Final distributable produced by exactly one generator."""

    kind: ExportFormat
    output_path: Path


__all__ = [
    "ARCHIVE_FORMATS",
    "SNAPSHOT_FORMATS",
    "ArchiveFormat",
    "Artifact",
    "BuiltPackage",
    "ExportFormat",
    "ExportRequest",
    "IfwOptions",
    "NugetOptions",
    "PackageSpec",
    "PlanEntry",
    "PlanStatus",
    "RequestOrigin",
    "StagingSnapshot",
]
