# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import re
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from portexport.config import ExportSettings, load_settings
from portexport.constants import INTEGRATION_FILES
from portexport.process_utils import SubprocessExecutionError

_NUSPEC_ID_RE = re.compile(r"<id>(.*?)</id>")


@dataclass
class SourceTree:
    """Fake source tree with built packages, ports and triplets."""

    root: Path

    def add_built(
        self,
        name: str,
        triplet: str = "x86-windows",
        *,
        version: str = "1.0",
        depends: Sequence[str] = (),
        files: dict[str, str] | None = None,
    ) -> Path:
        package_dir = self.root / "packages" / f"{name}_{triplet}"
        package_dir.mkdir(parents=True, exist_ok=True)
        control = [f"Package: {name}", f"Version: {version}", f"Architecture: {triplet}"]
        if depends:
            control.append(f"Depends: {', '.join(depends)}")
        (package_dir / "CONTROL").write_text("\n".join(control) + "\n", encoding="utf-8")
        (package_dir / "BUILD_INFO").write_text("CRTLinkage: dynamic\n", encoding="utf-8")
        payload = files if files is not None else {f"include/{name}.h": f"// {name}\n"}
        for relative, content in payload.items():
            target = package_dir / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return package_dir

    def add_port(self, name: str, *, build_depends: Sequence[str] = ()) -> Path:
        port_dir = self.root / "ports" / name
        port_dir.mkdir(parents=True, exist_ok=True)
        control = [f"Source: {name}", "Version: 1.0"]
        if build_depends:
            control.append(f"Build-Depends: {', '.join(build_depends)}")
        (port_dir / "CONTROL").write_text("\n".join(control) + "\n", encoding="utf-8")
        return port_dir

    def settings(self) -> ExportSettings:
        return load_settings(self.root, env={})

    def entries(self) -> set[str]:
        return {path.name for path in self.root.iterdir()}


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTree:
    """Return a source tree carrying the integration files and two triplets."""

    root = tmp_path / "tree"
    for relative in INTEGRATION_FILES:
        target = root / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(f"# {relative.name}\n", encoding="utf-8")
    triplets = root / "triplets"
    triplets.mkdir(parents=True)
    for triplet in ("x86-windows", "x64-windows"):
        (triplets / f"{triplet}.cmake").write_text("set(VCPKG_TARGET_ARCHITECTURE x86)\n", encoding="utf-8")
    return SourceTree(root=root)


@dataclass
class FakeTools:
    """Record external tool invocations and create the files they would produce."""

    calls: list[list[str]] = field(default_factory=list)
    fail_on: str | None = None

    def __call__(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        command = [str(arg) for arg in args]
        self.calls.append(command)
        if self.fail_on is not None and self.fail_on in command:
            raise SubprocessExecutionError(command, 2, "", "boom")
        if command[1:4] == ["-E", "tar", "cf"]:
            Path(command[4]).write_bytes(b"archive")
        elif command[1] == "pack":
            output_dir = Path(command[command.index("-OutputDirectory") + 1])
            nuspec = Path(command[command.index("-OutputDirectory") + 2])
            match = _NUSPEC_ID_RE.search(nuspec.read_text(encoding="utf-8"))
            assert match is not None
            (output_dir / f"{match.group(1)}.nupkg").write_bytes(b"nupkg")
        elif Path(command[0]).name == "binarycreator":
            Path(command[-1]).write_bytes(b"installer")
        return subprocess.CompletedProcess(command, 0, "", "")

    def tools(self) -> list[str]:
        return [Path(call[0]).name for call in self.calls]


@pytest.fixture
def fake_tools(monkeypatch: pytest.MonkeyPatch) -> FakeTools:
    """Replace external packaging tools with :class:`FakeTools`."""

    tools = FakeTools()
    monkeypatch.setattr("portexport.generators.base.run_command", tools)
    return tools


@dataclass
class RecordingLogger:
    """Collect pipeline output by level."""

    lines: list[tuple[str, str]] = field(default_factory=list)

    def echo(self, message: str) -> None:
        self.lines.append(("echo", message))

    def info(self, message: str) -> None:
        self.lines.append(("info", message))

    def ok(self, message: str) -> None:
        self.lines.append(("ok", message))

    def warn(self, message: str) -> None:
        self.lines.append(("warn", message))

    def text(self, level: str | None = None) -> str:
        return "\n".join(message for kind, message in self.lines if level is None or kind == level)


@pytest.fixture
def session_id() -> str:
    """Return a fixed export session identifier."""

    return "portexport-20250102-030405"


@pytest.fixture
def recording_logger() -> RecordingLogger:
    """Return a fresh :class:`RecordingLogger`."""

    return RecordingLogger()
