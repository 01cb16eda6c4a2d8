# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parser for CONTROL-style paragraph files describing ports and packages."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

from .errors import ConfigurationError

Paragraph = dict[str, str]


def parse_paragraphs(text: str, *, source: str = "<string>") -> list[Paragraph]:
    """Return the ``Key: value`` paragraphs contained in ``text``.

    Paragraphs are separated by blank lines. Lines starting with whitespace
    continue the previous field's value.

    Raises:
        ConfigurationError: If a line is neither a field nor a continuation.
    """

    paragraphs: list[Paragraph] = []
    current: Paragraph = {}
    last_key: str | None = None
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            if current:
                paragraphs.append(current)
            current, last_key = {}, None
            continue
        if line[0] in " \t":
            if last_key is None:
                raise ConfigurationError(f"{source}:{lineno}: continuation line without a field")
            current[last_key] = f"{current[last_key]}\n{line.strip()}"
            continue
        key, sep, value = line.partition(":")
        if not sep or not key.strip():
            raise ConfigurationError(f"{source}:{lineno}: expected 'Field: value'")
        last_key = key.strip()
        current[last_key] = value.strip()
    if current:
        paragraphs.append(current)
    return paragraphs


def load_paragraphs(path: Path) -> list[Paragraph]:
    """Read and parse the paragraph file at ``path``."""

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read {path}: {exc}") from exc
    return parse_paragraphs(text, source=str(path))


def split_list_field(value: str | None) -> list[str]:
    """Split a comma separated field, dropping ``(qualifier)`` suffixes and blanks."""

    if not value:
        return []
    return list(_iter_list_items(value))


def _iter_list_items(value: str) -> Iterator[str]:
    for item in value.split(","):
        name = item.split("(", 1)[0].strip()
        if name:
            yield name


__all__ = ["Paragraph", "load_paragraphs", "parse_paragraphs", "split_list_field"]
