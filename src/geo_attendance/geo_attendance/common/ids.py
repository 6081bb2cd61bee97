from __future__ import annotations

import uuid


def new_id() -> str:
    return uuid.uuid4().hex


def new_reference(kind: str) -> str:
    """Externally visible reference token, e.g. ``attendance-tx-3f2a...``."""
    return f"{kind}-tx-{uuid.uuid4().hex}"
