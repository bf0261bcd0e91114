from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from ..core.exceptions import StoreError
from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection):
    active = conn_factory.active()
    if active is not None:
        cur = conn_factory.cursor(active)
        try:
            yield active, cur
        except conn_factory.driver_errors as e:
            raise StoreError(str(e)) from e
        finally:
            cur.close()
        return

    conn = conn_factory.connect()
    try:
        cur = conn_factory.cursor(conn)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except conn_factory.driver_errors as e:
        conn.rollback()
        raise StoreError(str(e)) from e
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
