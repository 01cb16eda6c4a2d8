# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders for the export pipeline."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from .constants import CONFIG_FILE_NAME, DEFAULT_TRIPLET, PYPROJECT_SECTION_KEY
from .errors import ConfigurationError

ROOT_ENV: Final[str] = "PORTEXPORT_ROOT"
DEFAULT_TRIPLET_ENV: Final[str] = "PORTEXPORT_DEFAULT_TRIPLET"
EXPORT_ROOT_ENV: Final[str] = "PORTEXPORT_EXPORT_ROOT"

_PATH_KEYS: Final[tuple[str, ...]] = (
    "packages_dir",
    "ports_dir",
    "triplets_dir",
    "export_root",
    "scratch_dir",
)


class ExportSettings(BaseModel):
    """Filesystem layout and external tools used by an export session."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path
    packages_dir: Path | None = None
    ports_dir: Path | None = None
    triplets_dir: Path | None = None
    export_root: Path | None = None
    scratch_dir: Path | None = None
    default_triplet: str = DEFAULT_TRIPLET
    nuget_exe: str = "nuget"
    cmake_exe: str = "cmake"
    binarycreator_exe: str = "binarycreator"
    repogen_exe: str = "repogen"
    install_command: str = "portexport install"

    @model_validator(mode="after")
    def _derive_layout(self) -> ExportSettings:
        """Fill unset directories from ``root`` and anchor relative paths there."""

        root = self.root.expanduser().resolve()
        defaults = {
            "packages_dir": root / "packages",
            "ports_dir": root / "ports",
            "triplets_dir": root / "triplets",
            "export_root": root,
            "scratch_dir": root / "scripts" / "buildsystems" / "tmp",
        }
        # Bypass validate_assignment; re-entering the validator would recurse.
        object.__setattr__(self, "root", root)
        for key in _PATH_KEYS:
            value: Path | None = getattr(self, key)
            if value is None:
                resolved = defaults[key]
            elif value.is_absolute():
                resolved = value
            else:
                resolved = root / value
            object.__setattr__(self, key, resolved)
        return self

    def require(self, key: str) -> Path:
        """Return the derived directory stored under ``key``."""

        value = getattr(self, key)
        if not isinstance(value, Path):  # pragma: no cover - populated by the validator
            raise ConfigurationError(f"Setting '{key}' is not configured")
        return value


def load_settings(root: Path | None = None, *, env: Mapping[str, str] | None = None) -> ExportSettings:
    """Return settings merged from defaults, project files and the environment.

    Args:
        root: Source tree root. Falls back to ``PORTEXPORT_ROOT`` and then the
            current working directory.
        env: Environment mapping; defaults to :data:`os.environ`.

    Returns:
        ExportSettings: Validated settings with every directory resolved.

    Raises:
        ConfigurationError: If a configuration document is malformed.
    """

    environ = os.environ if env is None else env
    if root is None:
        env_root = environ.get(ROOT_ENV)
        root = Path(env_root) if env_root else Path.cwd()
    root = root.expanduser().resolve()

    payload: dict[str, Any] = {}
    payload.update(_load_project_document(root))
    if triplet := environ.get(DEFAULT_TRIPLET_ENV):
        payload["default_triplet"] = triplet
    if export_root := environ.get(EXPORT_ROOT_ENV):
        payload["export_root"] = Path(export_root)
    payload["root"] = root

    try:
        return ExportSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid portexport configuration under {root}: {exc}") from exc


def _load_project_document(root: Path) -> Mapping[str, Any]:
    config_file = root / CONFIG_FILE_NAME
    if config_file.is_file():
        return _read_table(config_file)
    pyproject = root / "pyproject.toml"
    if pyproject.is_file():
        document = _read_table(pyproject)
        tool = document.get("tool")
        if isinstance(tool, MutableMapping):
            section = tool.get(PYPROJECT_SECTION_KEY)
            if isinstance(section, MutableMapping):
                return dict(section)
    return {}


def _read_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as handle:
            data = tomllib.load(handle)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigurationError(f"Unable to read configuration at {path}: {exc}") from exc
    return dict(data)


__all__ = [
    "DEFAULT_TRIPLET_ENV",
    "EXPORT_ROOT_ENV",
    "ROOT_ENV",
    "ExportSettings",
    "load_settings",
]
