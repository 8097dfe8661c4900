from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable

import mysql.connector
from werkzeug.security import generate_password_hash

logger = logging.getLogger(__name__)


def _connect(db_config: dict, *, with_database: bool = True):
    kwargs = dict(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        use_pure=True,
    )
    if with_database:
        kwargs["database"] = str(db_config.get("database", "ojt_tracker"))
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql usable whatever the configured database name is.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a SQL script on ';' outside quotes; '--' line comments are dropped."""
    buf: list[str] = []
    in_single = False
    in_double = False
    in_comment = False
    escape = False
    prev = ""

    for ch in sql:
        if in_comment:
            if ch == "\n":
                in_comment = False
                buf.append(ch)
            prev = ch
            continue

        if escape:
            buf.append(ch)
            escape = False
        elif ch == "\\" and (in_single or in_double):
            buf.append(ch)
            escape = True
        elif ch == "-" and prev == "-" and not in_single and not in_double:
            buf.pop()
            in_comment = True
        elif ch == "'" and not in_double:
            in_single = not in_single
            buf.append(ch)
        elif ch == '"' and not in_single:
            in_double = not in_double
            buf.append(ch)
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
        else:
            buf.append(ch)
        prev = ch if not in_comment else ""

    tail = "".join(buf).strip()
    if tail:
        yield tail


def ensure_database_exists(db_config: dict) -> None:
    database = str(db_config.get("database", "ojt_tracker"))
    conn = _connect(db_config, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def _apply_script(db_config: dict, path: str | Path) -> int:
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    conn = _connect(db_config)
    count = 0
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
            count += 1
        conn.commit()
    finally:
        conn.close()
    return count


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _apply_script(db_config, schema_path)
    logger.info("Applied %s statements from %s", count, schema_path)


def ensure_demo_users(db_config: dict) -> None:
    """Create (or reset the password of) the demo reviewer accounts."""
    demo = [
        ("superadmin@ojt.local", "superadmin123", "superadmin"),
        ("admin@ojt.local", "admin123", "admin"),
        ("advisor@ojt.local", "advisor123", "department"),
    ]

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        for email, password, role in demo:
            cur.execute(
                """
                INSERT INTO users (email, password_hash, role, is_active)
                VALUES (%s, %s, %s, 1)
                ON DUPLICATE KEY UPDATE password_hash=VALUES(password_hash), role=VALUES(role), is_active=1
                """,
                (email, generate_password_hash(password), role),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo accounts ready (%s)", ", ".join(e for e, _, _ in demo))


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(db_config)
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


def ensure_demo_student(db_config: dict) -> None:
    """An accepted student on the regular shift, for trying the clock endpoints."""
    email, password = "student@ojt.local", "student123"

    conn = _connect(db_config)
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute(
            """
            INSERT INTO users (email, password_hash, role, is_active)
            VALUES (%s, %s, 'student', 1)
            ON DUPLICATE KEY UPDATE password_hash=VALUES(password_hash), is_active=1
            """,
            (email, generate_password_hash(password)),
        )
        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        user_id = int(cur.fetchone()["user_id"])
        cur.execute(
            """
            INSERT INTO students (
                user_id, student_number, first_name, last_name, course,
                department, host_establishment, shift_type, is_accepted, is_active
            )
            VALUES (%s, '2024-00001', 'Juan', 'Dela Cruz', 'BS Information Technology',
                    'College of Computing', 'City Hall ICT Office', 'regular', 1, 1)
            ON DUPLICATE KEY UPDATE is_accepted=1, is_active=1
            """,
            (user_id,),
        )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo student ready (%s)", email)
