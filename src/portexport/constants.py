# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants used across portexport modules."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Final

ROOT_MARKER: Final[str] = ".portexport-root"
EXPORT_ID_PREFIX: Final[str] = "portexport-"
EXPORT_ID_TIMESTAMP_FORMAT: Final[str] = "%Y%m%d-%H%M%S"
EXPORT_ID_TIMESTAMP_WIDTH: Final[int] = 15

DEFAULT_TRIPLET: Final[str] = "x86-windows"
DEFAULT_NUGET_VERSION: Final[str] = "1.0.0"

# Metadata kept at the root of a built package directory; never installed.
PACKAGE_CONTROL_FILE: Final[str] = "CONTROL"
PACKAGE_METADATA_FILES: Final[frozenset[str]] = frozenset({PACKAGE_CONTROL_FILE, "BUILD_INFO"})

INSTALLED_DIR_NAME: Final[str] = "installed"
LISTFILE_INFO_DIR: Final[PurePosixPath] = PurePosixPath("portexport", "info")

CMAKE_TOOLCHAIN_FILE: Final[PurePosixPath] = PurePosixPath("scripts", "buildsystems", "portexport.cmake")
MSBUILD_TARGETS_FILE: Final[PurePosixPath] = PurePosixPath(
    "scripts",
    "buildsystems",
    "msbuild",
    "portexport.targets",
)

# Files copied into every export so build systems can consume the exported packages.
INTEGRATION_FILES: Final[tuple[PurePosixPath, ...]] = (
    PurePosixPath(ROOT_MARKER),
    PurePosixPath("scripts", "buildsystems", "msbuild", "applocal.ps1"),
    MSBUILD_TARGETS_FILE,
    CMAKE_TOOLCHAIN_FILE,
    PurePosixPath("scripts", "cmake", "portexport_get_windows_sdk.cmake"),
    PurePosixPath("scripts", "getWindowsSDK.ps1"),
    PurePosixPath("scripts", "getProgramFilesPlatformBitness.ps1"),
    PurePosixPath("scripts", "getProgramFiles32bit.ps1"),
)

CONFIG_FILE_NAME: Final[str] = ".portexport.toml"
PYPROJECT_SECTION_KEY: Final[str] = "portexport"

__all__ = [
    "CMAKE_TOOLCHAIN_FILE",
    "CONFIG_FILE_NAME",
    "DEFAULT_NUGET_VERSION",
    "DEFAULT_TRIPLET",
    "EXPORT_ID_PREFIX",
    "EXPORT_ID_TIMESTAMP_FORMAT",
    "EXPORT_ID_TIMESTAMP_WIDTH",
    "INSTALLED_DIR_NAME",
    "INTEGRATION_FILES",
    "LISTFILE_INFO_DIR",
    "MSBUILD_TARGETS_FILE",
    "PACKAGE_CONTROL_FILE",
    "PACKAGE_METADATA_FILES",
    "PYPROJECT_SECTION_KEY",
    "ROOT_MARKER",
]
