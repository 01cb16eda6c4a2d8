# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Qt Installer Framework (IFW) installer export.

The installer is built from its own component tree rather than the shared
staging snapshot:

* ``packages`` and ``packages.<name>`` group the exported ports,
* ``packages.<name>.<triplet>`` carries one package's installed files,
* ``triplets.<triplet>`` groups components per target triplet,
* ``integration`` carries the build-system integration files.

``binarycreator`` turns the tree into an offline installer. When a
repository URL is configured ``repogen`` first publishes an online repository
and the installer is created in online-only mode.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from collections.abc import Sequence
from datetime import date
from pathlib import Path
from typing import Final, Protocol

from ..config import ExportSettings
from ..constants import INSTALLED_DIR_NAME, LISTFILE_INFO_DIR
from ..errors import ArtifactGenerationError, StagingError
from ..install import InstallDir, install_files_and_write_listfile
from ..models import Artifact, ExportFormat, IfwOptions, PlanEntry, PlanStatus
from ..staging import export_integration_files, remove_tree
from .base import run_tool

INSTALLER_TARGET_DIR: Final[str] = "@RootDir@/src/portexport"
_GROUP_VERSION: Final[str] = "1.0.0"


def component_id(group: str, *parts: str) -> str:
    """Return the dotted IFW component id for ``parts`` under ``group``.

    IFW reads every dot as a hierarchy level, so dots inside a package name or
    triplet become underscores.
    """

    return ".".join([group, *(part.replace(".", "_") for part in parts)])


class InstallerGenerator(Protocol):
    """Produce an installer artifact for a fully built plan."""

    def generate(self, plan: Sequence[PlanEntry], session_id: str, options: IfwOptions) -> Artifact:
        """Return the installer artifact for ``plan``.

        Args:
            plan: Export plan; every entry is already built.
            session_id: Identifier of the current export session.
            options: Installer-specific settings.

        Returns:
            Artifact: The generated installer.
        """

        raise NotImplementedError("InstallerGenerator.generate must be implemented")


class IfwLayout:
    """Resolved output locations for one IFW export."""

    def __init__(self, export_root: Path, session_id: str, options: IfwOptions) -> None:
        self.packages_dir = options.packages_dir or export_root / f"{session_id}-ifw-packages"
        self.repository_dir = options.repository_dir or export_root / f"{session_id}-ifw-repository"
        self.config_file = (
            options.config_file or export_root / f"{session_id}-ifw-configuration" / "config.xml"
        )
        self.installer_file = options.installer_file or export_root / f"{session_id}-ifw-installer.exe"
        self.repository_url = options.repository_url

    def component_dir(self, component: str) -> Path:
        """Return the directory holding ``component``."""

        return self.packages_dir / component


def _package_xml(
    display_name: str,
    version: str,
    *,
    dependencies: Sequence[str] = (),
    virtual: bool = False,
    forced: bool = False,
) -> bytes:
    package = ET.Element("Package")
    ET.SubElement(package, "DisplayName").text = display_name
    ET.SubElement(package, "Version").text = version
    ET.SubElement(package, "ReleaseDate").text = date.today().isoformat()
    if dependencies:
        ET.SubElement(package, "Dependencies").text = ",".join(dependencies)
    if virtual:
        ET.SubElement(package, "Virtual").text = "true"
    if forced:
        ET.SubElement(package, "ForcedInstallation").text = "true"
    ET.indent(package)
    return ET.tostring(package, encoding="utf-8", xml_declaration=True)


def _config_xml(repository_url: str | None) -> bytes:
    installer = ET.Element("Installer")
    ET.SubElement(installer, "Name").text = "portexport"
    ET.SubElement(installer, "Version").text = _GROUP_VERSION
    ET.SubElement(installer, "TargetDir").text = INSTALLER_TARGET_DIR
    if repository_url:
        repositories = ET.SubElement(installer, "RemoteRepositories")
        repository = ET.SubElement(repositories, "Repository")
        ET.SubElement(repository, "Url").text = repository_url
    ET.indent(installer)
    return ET.tostring(installer, encoding="utf-8", xml_declaration=True)


class IfwInstallerGenerator:
    """Build an IFW installer from an already-built plan."""

    def __init__(self, settings: ExportSettings) -> None:
        self._settings = settings

    def generate(self, plan: Sequence[PlanEntry], session_id: str, options: IfwOptions) -> Artifact:
        layout = IfwLayout(self._settings.require("export_root"), session_id, options)
        try:
            self._write_components(plan, layout)
            layout.config_file.parent.mkdir(parents=True, exist_ok=True)
            layout.config_file.write_bytes(_config_xml(layout.repository_url))
            layout.installer_file.parent.mkdir(parents=True, exist_ok=True)
        except (OSError, StagingError) as exc:
            raise ArtifactGenerationError(ExportFormat.IFW.value, f"unable to lay out installer: {exc}") from exc

        if layout.repository_url:
            run_tool(
                ExportFormat.IFW,
                [
                    self._settings.repogen_exe,
                    "--packages",
                    str(layout.packages_dir),
                    str(layout.repository_dir),
                ],
            )
            creator_args = ["--online-only", "--repository", str(layout.repository_dir)]
        else:
            creator_args = ["--packages", str(layout.packages_dir)]

        run_tool(
            ExportFormat.IFW,
            [
                self._settings.binarycreator_exe,
                "--config",
                str(layout.config_file),
                *creator_args,
                str(layout.installer_file),
            ],
        )
        return Artifact(kind=ExportFormat.IFW, output_path=layout.installer_file)

    def _write_components(self, plan: Sequence[PlanEntry], layout: IfwLayout) -> None:
        remove_tree(layout.packages_dir)
        layout.packages_dir.mkdir(parents=True)

        self._write_meta(layout, "packages", _package_xml("Packages", _GROUP_VERSION))
        self._write_meta(layout, "triplets", _package_xml("Triplets", _GROUP_VERSION))

        names: dict[str, str] = {}
        triplets: set[str] = set()
        for entry in plan:
            built = entry.built
            if entry.status is not PlanStatus.ALREADY_BUILT or built is None:
                raise ArtifactGenerationError(ExportFormat.IFW.value, f"{entry.spec} has not been built")
            names.setdefault(entry.spec.name, built.version)
            triplets.add(entry.spec.triplet)

            component = component_id("packages", entry.spec.name, entry.spec.triplet)
            dependencies = [component_id("triplets", entry.spec.triplet)]
            dependencies += [component_id("packages", dep.name, dep.triplet) for dep in built.depends]
            self._write_meta(
                layout,
                component,
                _package_xml(str(entry.spec), built.version, dependencies=dependencies),
            )
            installed_root = layout.component_dir(component) / "data" / INSTALLED_DIR_NAME
            install_files_and_write_listfile(
                built.package_dir,
                InstallDir.from_destination_root(
                    installed_root,
                    entry.spec.triplet,
                    installed_root / LISTFILE_INFO_DIR / f"{built.fullstem}.list",
                ),
            )

        for name, version in sorted(names.items()):
            self._write_meta(layout, component_id("packages", name), _package_xml(name, version))
        for triplet in sorted(triplets):
            self._write_meta(
                layout,
                component_id("triplets", triplet),
                _package_xml(triplet, _GROUP_VERSION, virtual=True),
            )

        self._write_meta(layout, "integration", _package_xml("Integration", _GROUP_VERSION, forced=True))
        export_integration_files(layout.component_dir("integration") / "data", self._settings.root)

    @staticmethod
    def _write_meta(layout: IfwLayout, component: str, payload: bytes) -> None:
        meta = layout.component_dir(component) / "meta"
        meta.mkdir(parents=True, exist_ok=True)
        (meta / "package.xml").write_bytes(payload)


__all__ = ["IfwInstallerGenerator", "IfwLayout", "InstallerGenerator", "component_id"]
