from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """Domain entity: an account that owns subjects.

    Note: plain data object (no DB access code).
    """

    user_id: str
    email: str
    display_name: str
    password_hash: str
