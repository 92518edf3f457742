"""Session payloads built from user records."""

from __future__ import annotations

from typing import Any

from .model import User


def session_from_user(user: User) -> dict[str, Any]:
    """Describe the logged-in user for a session response."""
    return {"id": user.id, "name": user.username, "role": user.role}