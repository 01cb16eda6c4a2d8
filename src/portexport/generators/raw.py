# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Raw export: the staging snapshot itself is the artifact."""

from __future__ import annotations

from ..models import Artifact, ExportFormat
from .base import GeneratorContext


def generate_raw(context: GeneratorContext) -> Artifact:
    """Return the snapshot directory as the raw artifact."""

    return Artifact(kind=ExportFormat.RAW, output_path=context.snapshot.root)


__all__ = ["generate_raw"]
