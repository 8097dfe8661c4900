from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import User
from .repository import UserRepository


def _to_user(r: dict) -> User:
    return User(
        user_id=int(r["user_id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, role, is_active FROM users WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, email, password_hash, role, is_active FROM users WHERE email=%s",
                (email.strip().lower(),),
            )
            r = fetchone(cur)
            return _to_user(r) if r else None
