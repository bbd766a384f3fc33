from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor

logger = logging.getLogger(__name__)

_DB_SELECTORS = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;\s*$")

DEMO_ACCOUNTS = (
    # full_name, email, password, role, kiosk PIN
    ("Admin Demo", "admin@chronos.local", "admin123", "admin", None),
    ("Jose Ferreira", "jose@chronos.local", "staff123", "employee", "1234"),
)


def split_sql(script: str) -> Iterator[str]:
    """Yield the statements of a .sql file, ignoring ``;`` inside string literals."""
    start = 0
    quote: Optional[str] = None
    i = 0
    while i < len(script):
        ch = script[i]
        if quote:
            if ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = script[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1
        i += 1

    tail = script[start:].strip()
    if tail:
        yield tail


def _db(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def run_sql_file(db: DatabaseConnection, path: Path) -> int:
    # The configured database name wins over any CREATE DATABASE / USE in the file.
    script = _DB_SELECTORS.sub("", path.read_text(encoding="utf-8"))
    count = 0
    with db_cursor(db, dictionary=False) as (_, cur):
        for stmt in split_sql(script):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
        cur.close()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = run_sql_file(_db(db_config), Path(schema_path))
    logger.info("Applied schema %s (%d statements)", schema_path, count)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    count = run_sql_file(_db(db_config), Path(seed_path))
    logger.info("Applied seed %s (%d statements)", seed_path, count)


def ensure_demo_users(db_config: dict) -> None:
    """Create the demo admin and kiosk employee, resetting their credentials if present."""
    with db_cursor(_db(db_config)) as (_, cur):
        for full_name, email, password, role, pin in DEMO_ACCOUNTS:
            values = (
                full_name,
                generate_password_hash(password),
                role,
                generate_password_hash(pin) if pin else None,
            )
            cur.execute("SELECT employee_id FROM employees WHERE email=%s", (email,))
            existing = cur.fetchone()
            if existing:
                cur.execute(
                    "UPDATE employees SET full_name=%s, password_hash=%s, role=%s, pin_hash=%s, is_active=1 "
                    "WHERE employee_id=%s",
                    (*values, existing["employee_id"]),
                )
                logger.info("Reset demo account %s", email)
            else:
                cur.execute(
                    "INSERT INTO employees (full_name, password_hash, role, pin_hash, email, work_start, work_end) "
                    "VALUES (%s, %s, %s, %s, %s, '09:00:00', '18:00:00')",
                    (*values, email),
                )
                logger.info("Created demo account %s", email)


def list_tables(db_config: dict) -> List[str]:
    with db_cursor(_db(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
