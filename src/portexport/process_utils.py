# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of packaging tools."""

from __future__ import annotations

import logging
import shutil

# Bandit: subprocess usage is intentional; packaging tools are invoked with
# argument lists and ``shell=True`` is never used.
import subprocess  # nosec B404
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from subprocess import CompletedProcess as _CompletedProcess  # nosec B404

LOGGER = logging.getLogger(__name__)


class SubprocessExecutionError(RuntimeError):
    """Raised when a packaging tool exits with a non-zero status."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: int,
        stdout: str | None,
        stderr: str | None,
    ) -> None:
        super().__init__(
            f"Command '{Path(command[0]).name}' exited with status {returncode}. stderr: {stderr or '<none>'}",
        )
        self.command = tuple(command)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(args: Sequence[str]) -> _CompletedProcess[str]:
    """Execute a packaging tool once, blocking until it exits.

    Output is captured so it can be reported when the tool fails; the exit
    status is the only success signal.

    Args:
        args: Executable followed by its arguments.

    Returns:
        CompletedProcess[str]: The finished process.

    Raises:
        FileNotFoundError: If the executable cannot be located.
        OSError: If the executable cannot be started.
        SubprocessExecutionError: If the tool exits with a non-zero status.
    """

    normalized = _normalize_args(args)
    LOGGER.debug("running command=%s", " ".join(normalized))
    # Bandit: commands are assembled from configured tool paths without shell expansion.
    completed: _CompletedProcess[str] = subprocess.run(  # nosec B603
        normalized,
        check=False,
        capture_output=True,
        text=True,
        stdin=subprocess.DEVNULL,
    )

    if completed.returncode != 0:
        raise SubprocessExecutionError(normalized, completed.returncode, completed.stdout, completed.stderr)

    return completed


__all__ = ["SubprocessExecutionError", "run_command"]
