from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account (any role)."""

    user_id: int
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
