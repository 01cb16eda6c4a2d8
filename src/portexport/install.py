# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Copy a built package's files into an install tree and record a listfile."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path

from .constants import PACKAGE_METADATA_FILES


@dataclass(frozen=True, slots=True)
class InstallDir:
    """Destination of a single package install."""

    destination_root: Path
    triplet: str
    listfile: Path

    @classmethod
    def from_destination_root(cls, destination_root: Path, triplet: str, listfile: Path) -> InstallDir:
        """Return an :class:`InstallDir` rooted at ``destination_root``."""

        return cls(destination_root=destination_root, triplet=triplet, listfile=listfile)

    @property
    def destination(self) -> Path:
        """Return the per-triplet directory receiving the package's files."""

        return self.destination_root / self.triplet


def install_files_and_write_listfile(source_dir: Path, dirs: InstallDir) -> list[str]:
    """Copy every file under ``source_dir`` into ``dirs`` and write its listfile.

    Root-level package metadata (``CONTROL``, ``BUILD_INFO``) is not copied.
    Existing destination files are overwritten.

    Args:
        source_dir: Built package directory.
        dirs: Install destination and listfile location.

    Returns:
        list[str]: Sorted entries written to the listfile, relative to the
        destination root (directories carry a trailing ``/``).

    Raises:
        FileNotFoundError: If ``source_dir`` does not exist.
        OSError: If copying or writing the listfile fails.
    """

    if not source_dir.is_dir():
        raise FileNotFoundError(f"Package directory {source_dir} does not exist")

    destination = dirs.destination
    destination.mkdir(parents=True, exist_ok=True)
    entries: list[str] = [f"{dirs.triplet}/"]

    for path in sorted(source_dir.rglob("*")):
        relative = path.relative_to(source_dir)
        if len(relative.parts) == 1 and relative.name in PACKAGE_METADATA_FILES:
            continue
        target = destination / relative
        listed = f"{dirs.triplet}/{relative.as_posix()}"
        if path.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            entries.append(f"{listed}/")
            continue
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(path, target)
        entries.append(listed)

    entries.sort()
    dirs.listfile.parent.mkdir(parents=True, exist_ok=True)
    dirs.listfile.write_text("".join(f"{entry}\n" for entry in entries), encoding="utf-8")
    return entries


__all__ = ["InstallDir", "install_files_and_write_listfile"]
