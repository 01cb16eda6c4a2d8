# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer command class that groups export options by format family in help output."""

from __future__ import annotations

from typing import Final

from click import Context, HelpFormatter, Parameter
from typer.core import TyperCommand

from ..options import FORMAT_SETTINGS, FORMAT_SWITCHES, ExportOption

ARGUMENT_PARAM_TYPE: Final[str] = "argument"
FORMATS_SECTION: Final[str] = "Export formats"
GENERAL_SECTION: Final[str] = "Options"


def help_sections() -> dict[str, frozenset[str]]:
    """Return help section titles mapped to the option names listed under them.

    Format switches and ``--dry-run`` share one section. Every format family
    with settings gets its own section named after the switch the settings
    require. Options not listed here fall into the general section.
    """

    sections = {FORMATS_SECTION: frozenset({str(ExportOption.DRY_RUN), *map(str, FORMAT_SWITCHES)})}
    for table in FORMAT_SETTINGS.values():
        sections[f"Settings for {table.owner}"] = frozenset(map(str, table.fields))
    return sections


class ExportHelpCommand(TyperCommand):
    """Typer command rendering arguments, format switches and per-format settings as separate sections."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        """Write one sorted definition list per help section.

        Args:
            ctx: Click context describing the application invocation.
            formatter: Click help formatter used to emit definition lists.
        """

        sections = help_sections()
        grouped: dict[str, list[tuple[str, tuple[str, str]]]] = {title: [] for title in sections}
        grouped[GENERAL_SECTION] = []
        arguments: list[tuple[str, str]] = []

        for param in self.get_params(ctx):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if getattr(param, "param_type_name", "") == ARGUMENT_PARAM_TYPE:
                arguments.append(record)
                continue
            name = _primary_option_name(param)
            title = next((title for title, names in sections.items() if name in names), GENERAL_SECTION)
            grouped[title].append((name.lstrip("-").lower(), record))

        if arguments:
            with formatter.section("Arguments"):
                formatter.write_dl(arguments)
        for title, entries in grouped.items():
            if not entries:
                continue
            with formatter.section(title):
                formatter.write_dl([record for _, record in sorted(entries, key=lambda item: item[0])])


def _primary_option_name(param: Parameter) -> str:
    """Return the first long option name of ``param``, falling back to its first name."""

    names = [*getattr(param, "opts", ()), *getattr(param, "secondary_opts", ())]
    long_names = [name for name in names if name.startswith("--")]
    if long_names:
        return long_names[0]
    return names[0] if names else param.name or ""


__all__ = ["ExportHelpCommand", "help_sections"]
