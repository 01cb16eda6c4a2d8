# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the packaging tool runner."""

from __future__ import annotations

import sys

import pytest

from portexport.process_utils import SubprocessExecutionError, run_command


def test_run_command_captures_output() -> None:
    completed = run_command([sys.executable, "-c", "print('packed')"])

    assert completed.returncode == 0
    assert completed.stdout.strip() == "packed"


def test_run_command_does_not_inherit_stdin() -> None:
    completed = run_command([sys.executable, "-c", "import sys; print(repr(sys.stdin.read()))"])

    assert completed.stdout.strip() == "''"


def test_run_command_raises_on_non_zero_exit() -> None:
    with pytest.raises(SubprocessExecutionError, match="exited with status 3") as excinfo:
        run_command([sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"])

    assert excinfo.value.returncode == 3
    assert excinfo.value.stderr == "boom"
    assert "boom" in str(excinfo.value)


def test_run_command_reports_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("portexport.process_utils.shutil.which", lambda _name: None)

    with pytest.raises(FileNotFoundError, match="'nuget' was not found on PATH"):
        run_command(["nuget", "pack"])
