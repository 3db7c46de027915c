from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from .connection import DBConfig

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connect(target: DBConfig, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connect(target, with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[str | Path] = None) -> None:
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)

    sql = _strip_create_db_and_use(Path(schema_path or SCHEMA_PATH).read_text(encoding="utf-8"))

    conn = _connect(target)
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()


def list_tables(db_config: dict) -> list[str]:
    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()


DEMO_BRANCHES = (
    ("Downtown Branch", 23.8103, 90.4125, 250.0),
    ("Uptown Branch", 23.7940, 90.4043, 250.0),
    ("Westside Hub", 23.7511, 90.3934, 500.0),
)

DEMO_USERS = (
    ("Super Admin", "superadmin", "admin123", "super_admin", None),
    ("Downtown Admin", "downtown_admin", "admin123", "branch_admin", "Downtown Branch"),
    ("Field Officer", "officer", "officer123", "officer", "Downtown Branch"),
    ("Pool Driver", "driver", "driver123", "driver", "Downtown Branch"),
)


def ensure_demo_data(db_config: dict) -> None:
    """Upsert the demo branches and one user per role (idempotent)."""

    conn = _connect(DBConfig.from_dict(db_config))
    try:
        cur = conn.cursor(dictionary=True)

        branch_ids: dict[str, int] = {}
        for name, lat, lng, radius in DEMO_BRANCHES:
            cur.execute("SELECT branch_id FROM branches WHERE name=%s", (name,))
            row = cur.fetchone()
            if row:
                cur.execute(
                    "UPDATE branches SET latitude=%s, longitude=%s, radius_meters=%s WHERE branch_id=%s",
                    (lat, lng, radius, row["branch_id"]),
                )
                branch_ids[name] = int(row["branch_id"])
            else:
                cur.execute(
                    "INSERT INTO branches (name, latitude, longitude, radius_meters) VALUES (%s, %s, %s, %s)",
                    (name, lat, lng, radius),
                )
                branch_ids[name] = int(cur.lastrowid)

        for full_name, username, password, role, branch_name in DEMO_USERS:
            branch_id = branch_ids.get(branch_name) if branch_name else None
            password_hash = generate_password_hash(password)
            cur.execute("SELECT user_id FROM users WHERE username=%s", (username,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET full_name=%s, password_hash=%s, role=%s, branch_id=%s, is_active=1
                    WHERE username=%s
                    """,
                    (full_name, password_hash, role, branch_id, username),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users (full_name, username, password_hash, role, branch_id)
                    VALUES (%s, %s, %s, %s, %s)
                    """,
                    (full_name, username, password_hash, role, branch_id),
                )

        conn.commit()
    finally:
        conn.close()
