"""Identifier generation for staged uploads and processed artifacts."""

from __future__ import annotations

import uuid


def new_id() -> str:
    """Return a random 128-bit token rendered as a 36 character UUID string."""
    return str(uuid.uuid4())
