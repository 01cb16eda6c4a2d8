# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point."""

from __future__ import annotations

from typing import Annotated

import typer

from .. import __version__
from .export import export_command
from .typer_ext import ExportHelpCommand

# Plain click formatting keeps ExportHelpCommand.format_options in charge of help output.
app = typer.Typer(
    help="Export built packages for consumption outside the source tree.",
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode=None,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"portexport {__version__}")
        raise typer.Exit(code=0)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_print_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Export built packages for consumption outside the source tree."""


app.command("export", cls=ExportHelpCommand)(export_command)

__all__ = ["app"]
