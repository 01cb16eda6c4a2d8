# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Export session identifiers."""

from __future__ import annotations

from datetime import datetime

from .constants import EXPORT_ID_PREFIX, EXPORT_ID_TIMESTAMP_FORMAT, EXPORT_ID_TIMESTAMP_WIDTH
from .errors import SessionIdentifierError


def create_export_id(now: datetime | None = None) -> str:
    """Return a sortable export identifier such as ``portexport-20250102-030405``.

    Two exports started within the same second share an identifier.

    Args:
        now: Timestamp to format; defaults to the current local time.

    Returns:
        str: Identifier built from the timestamp truncated to seconds.

    Raises:
        SessionIdentifierError: If the timestamp does not format to exactly
            15 characters.
    """

    moment = (now or datetime.now()).replace(microsecond=0)
    stamp = moment.strftime(EXPORT_ID_TIMESTAMP_FORMAT)
    if len(stamp) != EXPORT_ID_TIMESTAMP_WIDTH:
        raise SessionIdentifierError(
            f"Expected {EXPORT_ID_TIMESTAMP_WIDTH} characters in the export timestamp, but got "
            f"{len(stamp)} ({stamp!r})",
        )
    return f"{EXPORT_ID_PREFIX}{stamp}"


__all__ = ["create_export_id"]
