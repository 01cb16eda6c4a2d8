# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for export session identifiers and package specs."""

from __future__ import annotations

from datetime import datetime

import pytest

from portexport.errors import ConfigurationError, ExportError, SessionIdentifierError
from portexport.models import PackageSpec
from portexport.session import create_export_id


def test_export_id_formats_timestamp() -> None:
    assert create_export_id(datetime(2025, 1, 2, 3, 4, 5, 999_999)) == "portexport-20250102-030405"


def test_export_ids_sort_chronologically() -> None:
    earlier = create_export_id(datetime(2025, 1, 2, 23, 59, 59))
    later = create_export_id(datetime(2025, 1, 3, 0, 0, 0))

    assert earlier < later


def test_export_id_rejects_unexpected_width(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("portexport.session.EXPORT_ID_TIMESTAMP_FORMAT", "%Y%m%d")

    with pytest.raises(SessionIdentifierError, match="Expected 15 characters"):
        create_export_id(datetime(2025, 1, 2))


def test_session_identifier_error_is_not_an_export_error() -> None:
    assert not issubclass(SessionIdentifierError, ExportError)


def test_package_spec_uses_default_triplet() -> None:
    spec = PackageSpec.parse("ZLib", "x64-windows")

    assert spec == PackageSpec("zlib", "x64-windows")
    assert str(spec) == "zlib:x64-windows"
    assert spec.dir_name == "zlib_x64-windows"


def test_package_spec_keeps_explicit_triplet() -> None:
    assert PackageSpec.parse("boost:x86-uwp", "x64-windows") == PackageSpec("boost", "x86-uwp")


@pytest.mark.parametrize("text", ["", ":x86-windows", "zlib:", "zlib:x86:extra", "bad name"])
def test_package_spec_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ConfigurationError, match="Invalid package spec"):
        PackageSpec.parse(text, "x86-windows")
