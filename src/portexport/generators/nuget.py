# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""NuGet package export."""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from string import Template
from typing import Final
from xml.sax.saxutils import escape, quoteattr

from ..constants import DEFAULT_NUGET_VERSION, MSBUILD_TARGETS_FILE
from ..errors import ArtifactGenerationError
from ..models import Artifact, ExportFormat, NugetOptions, StagingSnapshot
from .base import GeneratorContext, run_tool

NUSPEC_FILE_NAME: Final[str] = "portexport.export.nuspec"
TARGETS_REDIRECT_FILE_NAME: Final[str] = "portexport.export.nuget.targets"

_NUSPEC_TEMPLATE: Final[Template] = Template(
    """<package>
    <metadata>
        <id>$package_id</id>
        <version>$version</version>
        <authors>portexport</authors>
        <description>
            portexport NuGet export
        </description>
    </metadata>
    <files>
$files
    </files>
</package>
""",
)

_TARGETS_REDIRECT_TEMPLATE: Final[Template] = Template(
    """<Project ToolsVersion="4.0" xmlns="http://schemas.microsoft.com/developer/msbuild/2003">
  <Import Condition="Exists('$target')" Project="$target" />
</Project>
""",
)


def resolve_nuget_identity(options: NugetOptions, snapshot: StagingSnapshot) -> tuple[str, str]:
    """Return the package id and version, applying the documented defaults.

    An unset id falls back to the snapshot directory name and an unset
    version to ``1.0.0``; repeated exports without explicit values therefore
    share an identity.
    """

    package_id = options.package_id or snapshot.name
    version = options.version or DEFAULT_NUGET_VERSION
    return package_id, version


def create_targets_redirect(target_path: str) -> str:
    """Return an MSBuild project importing ``target_path`` when it exists."""

    return _TARGETS_REDIRECT_TEMPLATE.substitute(target=escape(target_path, {"'": "&apos;", '"': "&quot;"}))


def _file_entry(source: str, target: str) -> str:
    return f"        <file src={quoteattr(source)} target={quoteattr(target)} />"


def create_nuspec_file_contents(
    snapshot_dir: Path,
    targets_redirect_path: Path,
    package_id: str,
    version: str,
) -> str:
    """Return the ``.nuspec`` description for the snapshot at ``snapshot_dir``.

    One ``<file>`` entry is emitted per top-level snapshot entry, plus the
    redirection stub placed under ``build/native``.
    """

    entries: list[str] = []
    for child in sorted(snapshot_dir.iterdir()):
        if child.is_dir():
            entries.append(_file_entry(f"{child.as_posix()}/**", child.name))
        else:
            entries.append(_file_entry(child.as_posix(), ""))
    entries.append(_file_entry(targets_redirect_path.as_posix(), f"build/native/{package_id}.targets"))
    return _NUSPEC_TEMPLATE.substitute(
        package_id=escape(package_id),
        version=escape(version),
        files="\n".join(entries),
    )


def generate_nuget(context: GeneratorContext) -> Artifact:
    """Write the package description into the scratch directory and run ``nuget pack``.

    The description and redirection stub stay in the scratch directory; only
    the ``.nupkg`` lands in ``output_dir``.

    Raises:
        ArtifactGenerationError: If the scratch files cannot be written or
            the packager fails.
    """

    snapshot = context.snapshot
    package_id, version = resolve_nuget_identity(context.request.nuget, snapshot)
    scratch_dir = context.settings.require("scratch_dir")

    # The stub lands in build/native inside the package, two levels below the root.
    redirect_target = PurePosixPath("..", "..", *MSBUILD_TARGETS_FILE.parts).as_posix()
    targets_redirect = scratch_dir / TARGETS_REDIRECT_FILE_NAME
    nuspec_path = scratch_dir / NUSPEC_FILE_NAME
    try:
        scratch_dir.mkdir(parents=True, exist_ok=True)
        targets_redirect.write_text(create_targets_redirect(redirect_target), encoding="utf-8")
        nuspec_path.write_text(
            create_nuspec_file_contents(snapshot.root, targets_redirect, package_id, version),
            encoding="utf-8",
        )
    except OSError as exc:
        raise ArtifactGenerationError(ExportFormat.NUGET.value, f"unable to write package description: {exc}") from exc

    # -NoDefaultExcludes keeps the dot-prefixed root marker.
    run_tool(
        ExportFormat.NUGET,
        [
            context.settings.nuget_exe,
            "pack",
            "-OutputDirectory",
            str(context.output_dir),
            str(nuspec_path),
            "-NoDefaultExcludes",
        ],
    )
    return Artifact(kind=ExportFormat.NUGET, output_path=context.output_dir / f"{package_id}.nupkg")


__all__ = [
    "NUSPEC_FILE_NAME",
    "TARGETS_REDIRECT_FILE_NAME",
    "create_nuspec_file_contents",
    "create_targets_redirect",
    "generate_nuget",
    "resolve_nuget_identity",
]
