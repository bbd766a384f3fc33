from __future__ import annotations

import json
from contextlib import contextmanager
from datetime import time, timedelta
from typing import Any, Dict, Iterable, List, Optional

from .connection import DatabaseConnection


@contextmanager
def db_cursor(db: DatabaseConnection, *, dictionary: bool = True):
    """Yield ``(conn, cursor)`` inside one transaction.

    Commits when the block exits cleanly, rolls back on any error and always
    releases the connection.
    """
    conn = db.connect()
    cur = None
    try:
        cur = conn.cursor(dictionary=dictionary)
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        if cur is not None:
            cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or ())


def normalize_mysql_time(value: Any) -> Optional[time]:
    """Coerce a TIME column into ``datetime.time``.

    The pure-python connector hands TIME back as ``timedelta``; dumps and
    older rows can also carry ``'HH:MM[:SS]'`` strings.
    """
    if value is None or isinstance(value, time):
        return value

    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        return time(seconds // 3600, seconds // 60 % 60, seconds % 60)

    if isinstance(value, (bytes, bytearray)):
        value = value.decode("ascii")

    if isinstance(value, str):
        pieces = [p for p in value.strip().split(":") if p != ""]
        if not 2 <= len(pieces) <= 3:
            raise ValueError(f"Invalid time string: {value!r}")
        try:
            numbers = [int(p) for p in pieces] + [0] * (3 - len(pieces))
        except ValueError:
            raise ValueError(f"Invalid time string: {value!r}") from None
        return time(*numbers)

    raise TypeError(f"Unsupported TIME value: {type(value).__name__}")


def load_json_vector(value: Any) -> Optional[List[float]]:
    """Face embeddings live in a TEXT column as a JSON array."""
    if value in (None, "", b""):
        return None
    if isinstance(value, (bytes, bytearray)):
        value = value.decode("utf-8")
    if isinstance(value, str):
        value = json.loads(value)
    return [float(x) for x in value]


def dump_json_vector(value: Optional[Iterable[float]]) -> Optional[str]:
    if value is None:
        return None
    return json.dumps([float(x) for x in value])
