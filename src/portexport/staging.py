# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Assemble the staging snapshot shared by the artifact generators."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from .config import ExportSettings
from .constants import INSTALLED_DIR_NAME, INTEGRATION_FILES, LISTFILE_INFO_DIR
from .errors import StagingError
from .install import InstallDir, install_files_and_write_listfile
from .models import PlanEntry, PlanStatus, StagingSnapshot

ProgressCallback = Callable[[str], None]


def export_integration_files(destination_root: Path, source_root: Path) -> list[Path]:
    """Copy the fixed integration files from ``source_root`` into ``destination_root``.

    Returns:
        list[Path]: Destination paths written.

    Raises:
        StagingError: If any integration file cannot be copied.
    """

    written: list[Path] = []
    for relative in INTEGRATION_FILES:
        source = source_root / relative
        destination = destination_root / relative
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, destination)
        except OSError as exc:
            raise StagingError(f"Unable to copy integration file {relative}: {exc}") from exc
        written.append(destination)
    return written


def remove_tree(path: Path) -> None:
    """Remove ``path`` whether it is a directory, file or symlink."""

    if path.is_symlink() or path.is_file():
        path.unlink()
    elif path.exists():
        shutil.rmtree(path)


class StagingManager:
    """Build a fresh :class:`StagingSnapshot` for each export session."""

    def __init__(
        self,
        settings: ExportSettings,
        *,
        on_package: ProgressCallback | None = None,
        on_package_done: ProgressCallback | None = None,
    ) -> None:
        self._settings = settings
        self._on_package = on_package
        self._on_package_done = on_package_done

    def snapshot_path(self, session_id: str) -> Path:
        """Return the directory the snapshot for ``session_id`` occupies."""

        return self._settings.require("export_root") / session_id

    def stage(self, plan: Sequence[PlanEntry], session_id: str) -> StagingSnapshot:
        """Build the snapshot for ``plan`` from scratch.

        Any directory already present at the target path is removed first so
        the snapshot reflects exactly the current plan.

        Args:
            plan: Export plan; every entry must be already built.
            session_id: Identifier naming the snapshot directory.

        Returns:
            StagingSnapshot: The assembled snapshot.

        Raises:
            StagingError: If the plan is incomplete or filesystem work fails.
        """

        unbuilt = [str(entry.spec) for entry in plan if entry.status is not PlanStatus.ALREADY_BUILT]
        if unbuilt:
            raise StagingError(f"Refusing to stage unbuilt packages: {', '.join(unbuilt)}")

        snapshot = StagingSnapshot(root=self.snapshot_path(session_id), session_id=session_id)
        try:
            remove_tree(snapshot.root)
            snapshot.root.mkdir(parents=True)
        except OSError as exc:
            raise StagingError(f"Unable to prepare staging directory {snapshot.root}: {exc}") from exc

        for entry in plan:
            self._install_entry(entry, snapshot)

        export_integration_files(snapshot.root, self._settings.root)
        return snapshot

    def _install_entry(self, entry: PlanEntry, snapshot: StagingSnapshot) -> None:
        built = entry.built
        if built is None:  # pragma: no cover - PlanEntry enforces this
            raise StagingError(f"{entry.spec} has no built package metadata")
        display_name = str(entry.spec)
        if self._on_package is not None:
            self._on_package(display_name)
        installed_root = snapshot.root / INSTALLED_DIR_NAME
        dirs = InstallDir.from_destination_root(
            installed_root,
            entry.spec.triplet,
            installed_root / LISTFILE_INFO_DIR / f"{built.fullstem}.list",
        )
        try:
            install_files_and_write_listfile(built.package_dir, dirs)
        except OSError as exc:
            raise StagingError(f"Unable to export package {display_name}: {exc}") from exc
        if self._on_package_done is not None:
            self._on_package_done(display_name)


__all__ = ["StagingManager", "export_integration_files", "remove_tree"]
