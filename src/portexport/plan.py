# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Export plan resolution, classification and operator-facing reporting."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol

from .config import ExportSettings
from .constants import PACKAGE_CONTROL_FILE
from .errors import ConfigurationError, UnbuiltDependencyError
from .models import BuiltPackage, PackageSpec, PlanEntry, PlanStatus, RequestOrigin
from .paragraphs import Paragraph, load_paragraphs, split_list_field

LOGGER = logging.getLogger(__name__)

ALREADY_BUILT_HEADER: Final[str] = "The following packages are already built and will be exported:"
NEEDS_BUILD_HEADER: Final[str] = "The following packages need to be built:"
AUTO_SELECTED_WARNING: Final[str] = "Additional packages (*) need to be exported to complete this operation."


class PlanResolver(Protocol):
    """Compute the ordered export plan for a set of requested specs."""

    def resolve(self, specs: Sequence[PackageSpec]) -> list[PlanEntry]:
        """Return plan entries for ``specs`` and everything they depend on.

        Args:
            specs: Package specs requested by the operator.

        Returns:
            list[PlanEntry]: Entries in dependency-first order.
        """

        raise NotImplementedError("PlanResolver.resolve must be implemented")


class FilesystemPlanResolver:
    """Resolve plans from a ``packages``/``ports`` directory layout.

    A package is already built when ``<packages>/<name>_<triplet>/CONTROL``
    exists. Otherwise the port's ``<ports>/<name>/CONTROL`` must exist and the
    package needs to be built.
    """

    def __init__(self, settings: ExportSettings) -> None:
        self._packages_dir = settings.require("packages_dir")
        self._ports_dir = settings.require("ports_dir")
        self._triplets_dir = settings.require("triplets_dir")

    def resolve(self, specs: Sequence[PackageSpec]) -> list[PlanEntry]:
        requested = set(specs)
        ordered: list[PlanEntry] = []
        done: set[PackageSpec] = set()
        for spec in sorted(requested):
            self._visit(spec, requested, ordered, done, ())
        return ordered

    def installed_specs(self) -> list[PackageSpec]:
        """Return every package that has already been built."""

        if not self._packages_dir.is_dir():
            return []
        specs: list[PackageSpec] = []
        for control in sorted(self._packages_dir.glob(f"*/{PACKAGE_CONTROL_FILE}")):
            specs.append(self._load_built(control).spec)
        return sorted(specs)

    def check_triplet(self, triplet: str) -> None:
        """Reject ``triplet`` when a triplets directory exists without it.

        Raises:
            ConfigurationError: If the triplet is unknown.
        """

        if not self._triplets_dir.is_dir():
            return
        if not (self._triplets_dir / f"{triplet}.cmake").is_file():
            available = sorted(path.stem for path in self._triplets_dir.glob("*.cmake"))
            raise ConfigurationError(
                f"Invalid triplet: {triplet}. Available triplets: {', '.join(available) or '<none>'}",
            )

    def _visit(
        self,
        spec: PackageSpec,
        requested: set[PackageSpec],
        ordered: list[PlanEntry],
        done: set[PackageSpec],
        stack: tuple[PackageSpec, ...],
    ) -> None:
        if spec in done:
            return
        if spec in stack:
            chain = " -> ".join(str(item) for item in (*stack, spec))
            raise ConfigurationError(f"Dependency cycle detected: {chain}")

        origin = RequestOrigin.USER_REQUESTED if spec in requested else RequestOrigin.AUTO_SELECTED
        control = self._packages_dir / spec.dir_name / PACKAGE_CONTROL_FILE
        if control.is_file():
            built = self._load_built(control)
            for dependency in built.depends:
                self._visit(dependency, requested, ordered, done, (*stack, spec))
            entry = PlanEntry(spec=spec, status=PlanStatus.ALREADY_BUILT, origin=origin, built=built)
        else:
            for dependency in self._port_dependencies(spec):
                self._visit(dependency, requested, ordered, done, (*stack, spec))
            entry = PlanEntry(spec=spec, status=PlanStatus.NEEDS_BUILD, origin=origin)

        LOGGER.debug("planned %s status=%s origin=%s", spec, entry.status.value, origin.value)
        done.add(spec)
        ordered.append(entry)

    def _load_built(self, control: Path) -> BuiltPackage:
        paragraph = _first_paragraph(control)
        package_dir = control.parent
        fallback_name, _, fallback_triplet = package_dir.name.partition("_")
        spec = PackageSpec(
            name=paragraph.get("Package", fallback_name).lower(),
            triplet=paragraph.get("Architecture", fallback_triplet).lower(),
        )
        return BuiltPackage(
            spec=spec,
            version=paragraph.get("Version", "0"),
            package_dir=package_dir,
            depends=_dependency_specs(paragraph.get("Depends"), spec.triplet),
        )

    def _port_dependencies(self, spec: PackageSpec) -> tuple[PackageSpec, ...]:
        control = self._ports_dir / spec.name / PACKAGE_CONTROL_FILE
        if not control.is_file():
            raise ConfigurationError(f"Unknown package: {spec}. No port found at {control.parent}")
        paragraph = _first_paragraph(control)
        return _dependency_specs(paragraph.get("Build-Depends"), spec.triplet)


def _first_paragraph(path: Path) -> Paragraph:
    paragraphs = load_paragraphs(path)
    if not paragraphs:
        raise ConfigurationError(f"{path} does not contain any fields")
    return paragraphs[0]


def _dependency_specs(field: str | None, triplet: str) -> tuple[PackageSpec, ...]:
    names = (item.split("[", 1)[0].strip().lower() for item in split_list_field(field))
    return tuple(PackageSpec(name=name, triplet=triplet) for name in names if name)


@dataclass(frozen=True, slots=True)
class PlanReport:
    """Plan entries partitioned by build status, each group sorted by spec."""

    already_built: tuple[PlanEntry, ...]
    needs_build: tuple[PlanEntry, ...]

    @property
    def fully_built(self) -> bool:
        """Return ``True`` when nothing in the plan needs to be built."""

        return not self.needs_build

    @property
    def has_auto_selected(self) -> bool:
        """Return ``True`` when any entry was pulled in as a dependency."""

        return any(not entry.user_requested for entry in (*self.already_built, *self.needs_build))

    @property
    def remediation_specs(self) -> tuple[PackageSpec, ...]:
        """Return the user-requested specs that still need to be built.

        Dependency-only entries are omitted; building the requested set pulls
        them in.
        """

        return tuple(entry.spec for entry in self.needs_build if entry.user_requested)


def classify_plan(entries: Iterable[PlanEntry]) -> PlanReport:
    """Partition ``entries`` by status.

    Raises:
        ConfigurationError: If ``entries`` is empty.
    """

    materialised = list(entries)
    if not materialised:
        raise ConfigurationError("Export plan cannot be empty")
    already_built = sorted(
        (entry for entry in materialised if entry.status is PlanStatus.ALREADY_BUILT),
        key=lambda entry: entry.spec,
    )
    needs_build = sorted(
        (entry for entry in materialised if entry.status is PlanStatus.NEEDS_BUILD),
        key=lambda entry: entry.spec,
    )
    return PlanReport(already_built=tuple(already_built), needs_build=tuple(needs_build))


def format_entry(entry: PlanEntry) -> str:
    """Return ``entry`` indented, with ``*`` marking auto-selected packages."""

    marker = "    " if entry.user_requested else "  * "
    return f"{marker}{entry.spec}"


def render_plan(report: PlanReport) -> list[str]:
    """Return one text block per non-empty status group."""

    sections: list[str] = []
    for header, group in ((ALREADY_BUILT_HEADER, report.already_built), (NEEDS_BUILD_HEADER, report.needs_build)):
        if group:
            sections.append("\n".join([header, *(format_entry(entry) for entry in group)]))
    return sections


def remediation_command(specs: Iterable[PackageSpec], *, install_command: str) -> str:
    """Return the command that builds ``specs``."""

    return " ".join([install_command, *(str(spec) for spec in specs)])


def ensure_buildable(report: PlanReport, *, install_command: str) -> None:
    """Raise when the plan still contains unbuilt packages.

    Raises:
        UnbuiltDependencyError: If any entry needs to be built first.
    """

    if report.fully_built:
        return
    specs = report.remediation_specs
    raise UnbuiltDependencyError(specs, command=remediation_command(specs, install_command=install_command))


__all__ = [
    "ALREADY_BUILT_HEADER",
    "AUTO_SELECTED_WARNING",
    "NEEDS_BUILD_HEADER",
    "FilesystemPlanResolver",
    "PlanReport",
    "PlanResolver",
    "classify_plan",
    "ensure_buildable",
    "format_entry",
    "remediation_command",
    "render_plan",
]
