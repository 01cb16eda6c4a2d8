# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for console logging helpers."""

from __future__ import annotations

import pytest

from portexport.cli.shared import CLILogger, build_cli_logger
from portexport.logging import emoji, fail, ok, warn


def test_emoji_prefixes_follow_preference(capsys: pytest.CaptureFixture[str]) -> None:
    ok("exported", use_emoji=True, use_color=False)
    ok("exported", use_emoji=False, use_color=False)

    lines = capsys.readouterr().out.splitlines()
    assert lines == ["✅ exported", "exported"]


def test_warn_and_fail_prefixes(capsys: pytest.CaptureFixture[str]) -> None:
    warn("careful", use_emoji=True, use_color=False)
    fail("broken", use_emoji=True, use_color=False)

    out = capsys.readouterr().out
    assert out.splitlines()[0].endswith(" careful")
    assert "❌ broken" in out


def test_emoji_helper_blanks_symbols() -> None:
    assert emoji("✅", True) == "✅"
    assert emoji("✅", False) == ""


def test_cli_logger_routes_through_helpers(capsys: pytest.CaptureFixture[str]) -> None:
    logger = build_cli_logger(emoji=False)
    assert logger == CLILogger(use_emoji=False, use_color=None)

    logger.info("Creating zip archive...")
    logger.echo("    zlib:x86-windows")

    assert capsys.readouterr().out.splitlines() == ["Creating zip archive...", "    zlib:x86-windows"]
