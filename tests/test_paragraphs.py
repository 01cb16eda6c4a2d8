# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for CONTROL paragraph parsing."""

from __future__ import annotations

from pathlib import Path

import pytest

from portexport.errors import ConfigurationError
from portexport.paragraphs import load_paragraphs, parse_paragraphs, split_list_field


def test_parse_paragraphs_splits_on_blank_lines() -> None:
    text = "Source: zlib\nVersion: 1.2\n\nFeature: extra\nDescription: first\n  second\n"

    paragraphs = parse_paragraphs(text)

    assert paragraphs == [
        {"Source": "zlib", "Version": "1.2"},
        {"Feature": "extra", "Description": "first\nsecond"},
    ]


def test_parse_paragraphs_rejects_orphan_continuation() -> None:
    with pytest.raises(ConfigurationError, match="continuation line without a field"):
        parse_paragraphs("  dangling\n", source="CONTROL")


def test_parse_paragraphs_rejects_lines_without_colon() -> None:
    with pytest.raises(ConfigurationError, match="CONTROL:2: expected 'Field: value'"):
        parse_paragraphs("Source: zlib\nnot a field\n", source="CONTROL")


def test_load_paragraphs_reports_missing_files(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError, match="Unable to read"):
        load_paragraphs(tmp_path / "CONTROL")


def test_split_list_field_drops_qualifiers_and_blanks() -> None:
    assert split_list_field("zlib, bzip2 (windows), , openssl") == ["zlib", "bzip2", "openssl"]
    assert split_list_field(None) == []
