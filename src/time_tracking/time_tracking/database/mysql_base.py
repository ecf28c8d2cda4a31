from __future__ import annotations

from contextlib import contextmanager, suppress
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import OpenRecordConflictError, StoreError
from .connection import DatabaseConnection

OPEN_RECORD_INDEX = "uq_stamp_records_open_user"


def translate_mysql_error(err: mysql.connector.Error) -> StoreError:
    """Map a driver error onto the store error kinds.

    Only the duplicate key on the open-record index gets its own kind; every
    other failure (connectivity, timeouts, other constraints) stays a plain
    StoreError.
    """

    if err.errno == errorcode.ER_DUP_ENTRY and OPEN_RECORD_INDEX in str(err.msg or ""):
        return OpenRecordConflictError(str(err))
    return StoreError(str(err))


def _rollback_quietly(conn) -> None:
    # A dropped connection fails the rollback too; the original error is the one to report.
    with suppress(mysql.connector.Error):
        conn.rollback()


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as e:
        raise translate_mysql_error(e) from e

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as e:
        _rollback_quietly(conn)
        raise translate_mysql_error(e) from e
    except Exception:
        _rollback_quietly(conn)
        raise
    finally:
        with suppress(mysql.connector.Error):
            conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])
