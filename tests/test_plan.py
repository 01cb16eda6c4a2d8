# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for plan resolution and classification."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from portexport.errors import ConfigurationError, UnbuiltDependencyError
from portexport.models import BuiltPackage, PackageSpec, PlanEntry, PlanStatus, RequestOrigin
from portexport.plan import (
    ALREADY_BUILT_HEADER,
    NEEDS_BUILD_HEADER,
    FilesystemPlanResolver,
    classify_plan,
    ensure_buildable,
    render_plan,
)

if TYPE_CHECKING:
    from conftest import SourceTree


def _spec(name: str) -> PackageSpec:
    return PackageSpec(name, "x86-windows")


def _built(name: str, origin: RequestOrigin = RequestOrigin.USER_REQUESTED) -> PlanEntry:
    spec = _spec(name)
    return PlanEntry(
        spec=spec,
        status=PlanStatus.ALREADY_BUILT,
        origin=origin,
        built=BuiltPackage(spec=spec, version="1.0", package_dir=Path("/unused")),
    )


def _unbuilt(name: str, origin: RequestOrigin = RequestOrigin.USER_REQUESTED) -> PlanEntry:
    return PlanEntry(spec=_spec(name), status=PlanStatus.NEEDS_BUILD, origin=origin)


def test_resolver_orders_dependencies_first(source_tree: SourceTree) -> None:
    source_tree.add_built("zlib")
    source_tree.add_built("libpng", depends=["zlib"])

    plan = FilesystemPlanResolver(source_tree.settings()).resolve([_spec("libpng")])

    assert [entry.spec.name for entry in plan] == ["zlib", "libpng"]
    assert plan[0].origin is RequestOrigin.AUTO_SELECTED
    assert plan[1].origin is RequestOrigin.USER_REQUESTED
    assert all(entry.status is PlanStatus.ALREADY_BUILT for entry in plan)


def test_resolver_marks_ports_without_packages_as_needing_build(source_tree: SourceTree) -> None:
    source_tree.add_port("zlib")
    source_tree.add_port("libpng", build_depends=["zlib"])

    plan = FilesystemPlanResolver(source_tree.settings()).resolve([_spec("libpng")])

    assert [(entry.spec.name, entry.status) for entry in plan] == [
        ("zlib", PlanStatus.NEEDS_BUILD),
        ("libpng", PlanStatus.NEEDS_BUILD),
    ]


def test_resolver_rejects_unknown_packages(source_tree: SourceTree) -> None:
    with pytest.raises(ConfigurationError, match="Unknown package: nothere:x86-windows"):
        FilesystemPlanResolver(source_tree.settings()).resolve([_spec("nothere")])


def test_resolver_detects_cycles(source_tree: SourceTree) -> None:
    source_tree.add_port("a", build_depends=["b"])
    source_tree.add_port("b", build_depends=["a"])

    with pytest.raises(ConfigurationError, match="Dependency cycle detected"):
        FilesystemPlanResolver(source_tree.settings()).resolve([_spec("a")])


def test_installed_specs_lists_built_packages(source_tree: SourceTree) -> None:
    source_tree.add_built("zlib")
    source_tree.add_built("zlib", "x64-windows")

    specs = FilesystemPlanResolver(source_tree.settings()).installed_specs()

    assert specs == [PackageSpec("zlib", "x64-windows"), PackageSpec("zlib", "x86-windows")]


def test_check_triplet_rejects_unknown_triplets(source_tree: SourceTree) -> None:
    resolver = FilesystemPlanResolver(source_tree.settings())

    resolver.check_triplet("x64-windows")
    with pytest.raises(ConfigurationError, match="Invalid triplet: arm-android"):
        resolver.check_triplet("arm-android")


def test_classify_plan_rejects_empty_plans() -> None:
    with pytest.raises(ConfigurationError, match="Export plan cannot be empty"):
        classify_plan([])


def test_classification_partitions_and_sorts_each_group() -> None:
    report = classify_plan(
        [_built("zlib"), _unbuilt("boost"), _built("bzip2", RequestOrigin.AUTO_SELECTED), _unbuilt("abseil")],
    )

    assert [entry.spec.name for entry in report.already_built] == ["bzip2", "zlib"]
    assert [entry.spec.name for entry in report.needs_build] == ["abseil", "boost"]
    assert report.has_auto_selected
    assert not report.fully_built


def test_render_plan_marks_auto_selected_entries() -> None:
    report = classify_plan([_built("zlib", RequestOrigin.AUTO_SELECTED), _built("libpng"), _unbuilt("boost")])

    assert render_plan(report) == [
        f"{ALREADY_BUILT_HEADER}\n    libpng:x86-windows\n  * zlib:x86-windows",
        f"{NEEDS_BUILD_HEADER}\n    boost:x86-windows",
    ]


def test_render_plan_omits_empty_groups() -> None:
    sections = render_plan(classify_plan([_built("zlib")]))

    assert len(sections) == 1
    assert sections[0].startswith(ALREADY_BUILT_HEADER)


def test_remediation_lists_only_user_requested_unbuilt_specs() -> None:
    report = classify_plan([_unbuilt("a"), _unbuilt("b", RequestOrigin.AUTO_SELECTED), _built("c")])

    with pytest.raises(UnbuiltDependencyError) as excinfo:
        ensure_buildable(report, install_command="portexport install")

    assert excinfo.value.specs == (_spec("a"),)
    assert excinfo.value.command == "portexport install a:x86-windows"


def test_fully_built_plan_passes() -> None:
    ensure_buildable(classify_plan([_built("zlib")]), install_command="portexport install")


def test_plan_entry_requires_consistent_build_metadata() -> None:
    with pytest.raises(ValueError, match="built metadata"):
        PlanEntry(spec=_spec("zlib"), status=PlanStatus.ALREADY_BUILT, origin=RequestOrigin.USER_REQUESTED)
