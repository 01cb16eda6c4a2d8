# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the package install-file copy service."""

from __future__ import annotations

from pathlib import Path

import pytest

from portexport.install import InstallDir, install_files_and_write_listfile


def _package(tmp_path: Path) -> Path:
    package_dir = tmp_path / "zlib_x86-windows"
    (package_dir / "include").mkdir(parents=True)
    (package_dir / "lib").mkdir()
    (package_dir / "include" / "zlib.h").write_text("// zlib\n", encoding="utf-8")
    (package_dir / "lib" / "zlib.lib").write_bytes(b"\x00lib")
    (package_dir / "CONTROL").write_text("Package: zlib\n", encoding="utf-8")
    (package_dir / "BUILD_INFO").write_text("CRTLinkage: dynamic\n", encoding="utf-8")
    return package_dir


def test_install_copies_files_and_writes_sorted_listfile(tmp_path: Path) -> None:
    source = _package(tmp_path)
    installed = tmp_path / "installed"
    listfile = installed / "portexport" / "info" / "zlib_1.2_x86-windows.list"

    entries = install_files_and_write_listfile(
        source,
        InstallDir.from_destination_root(installed, "x86-windows", listfile),
    )

    assert (installed / "x86-windows" / "include" / "zlib.h").read_text(encoding="utf-8") == "// zlib\n"
    assert (installed / "x86-windows" / "lib" / "zlib.lib").read_bytes() == b"\x00lib"
    assert not (installed / "x86-windows" / "CONTROL").exists()
    assert not (installed / "x86-windows" / "BUILD_INFO").exists()
    assert entries == [
        "x86-windows/",
        "x86-windows/include/",
        "x86-windows/include/zlib.h",
        "x86-windows/lib/",
        "x86-windows/lib/zlib.lib",
    ]
    assert listfile.read_text(encoding="utf-8").splitlines() == entries


def test_install_keeps_nested_metadata_named_files(tmp_path: Path) -> None:
    source = _package(tmp_path)
    (source / "share" / "zlib").mkdir(parents=True)
    (source / "share" / "zlib" / "CONTROL").write_text("nested\n", encoding="utf-8")
    installed = tmp_path / "installed"

    install_files_and_write_listfile(
        source,
        InstallDir.from_destination_root(installed, "x86-windows", installed / "zlib.list"),
    )

    assert (installed / "x86-windows" / "share" / "zlib" / "CONTROL").is_file()


def test_install_requires_existing_source(tmp_path: Path) -> None:
    dirs = InstallDir.from_destination_root(tmp_path / "installed", "x86-windows", tmp_path / "zlib.list")

    with pytest.raises(FileNotFoundError):
        install_files_and_write_listfile(tmp_path / "missing", dirs)
