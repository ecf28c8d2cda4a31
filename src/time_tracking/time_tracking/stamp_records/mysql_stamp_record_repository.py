from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import SORTABLE_FIELDS
from ..core.enums import SortDirection
from ..core.exceptions import StoreError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Page, PageRequest, SortSpec, StampRecord
from .repository import StampRecordRepository

_COLUMNS = "id, user_id, check_in_millis, check_out_millis"


def _to_record(r: Dict[str, Any]) -> StampRecord:
    check_out = r.get("check_out_millis")
    return StampRecord(
        id=int(r["id"]),
        user_id=int(r["user_id"]),
        check_in_millis=int(r["check_in_millis"]),
        check_out_millis=int(check_out) if check_out is not None else None,
    )


def order_by_clause(sort: SortSpec) -> str:
    # Column names cannot be bound as parameters, so only whitelisted ones get through.
    if sort.field not in SORTABLE_FIELDS:
        raise ValueError(f"Unsupported sort field: {sort.field!r}")
    direction = "DESC" if sort.direction == SortDirection.DESC else "ASC"
    if sort.field == "id":
        return f"ORDER BY id {direction}"
    return f"ORDER BY {sort.field} {direction}, id {direction}"


class MySQLStampRecordRepository(StampRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def insert(self, record: StampRecord) -> StampRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO stamp_records (user_id, check_in_millis, check_out_millis)
                VALUES (%s, %s, %s)
                """,
                (record.user_id, record.check_in_millis, record.check_out_millis),
            )
            new_id = cur.lastrowid
        if not new_id:
            raise StoreError("Insert did not return an id")
        return StampRecord(
            id=int(new_id),
            user_id=record.user_id,
            check_in_millis=record.check_in_millis,
            check_out_millis=record.check_out_millis,
        )

    def replace(self, record: StampRecord) -> bool:
        if record.id is None:
            raise StoreError("Cannot replace a record without id")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE stamp_records
                SET user_id=%s, check_in_millis=%s, check_out_millis=%s
                WHERE id=%s
                """,
                (record.user_id, record.check_in_millis, record.check_out_millis, record.id),
            )
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when nothing changed, so look the row up.
            cur.execute("SELECT 1 AS found FROM stamp_records WHERE id=%s", (record.id,))
            return fetchone(cur) is not None

    def get_by_id(self, record_id: int) -> Optional[StampRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM stamp_records WHERE id=%s", (record_id,))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def exists_by_id(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS found FROM stamp_records WHERE id=%s", (record_id,))
            return fetchone(cur) is not None

    def delete_by_id(self, record_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM stamp_records WHERE id=%s", (record_id,))
            return cur.rowcount > 0

    def latest_by_user(self, user_id: int) -> Optional[StampRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM stamp_records
                WHERE user_id=%s
                {order_by_clause(SortSpec())}
                LIMIT 1
                """,
                (user_id,),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def by_user_and_check_in_range(self, user_id: int, start_millis: int, end_millis: int) -> Sequence[StampRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM stamp_records
                WHERE user_id=%s AND check_in_millis BETWEEN %s AND %s
                {order_by_clause(SortSpec(direction=SortDirection.ASC))}
                """,
                (user_id, int(start_millis), int(end_millis)),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def page_by_user(self, user_id: int, page_request: PageRequest) -> Page:
        order_by = order_by_clause(page_request.sort)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM stamp_records WHERE user_id=%s", (user_id,))
            total_row = fetchone(cur)
            total = int(total_row["total"]) if total_row else 0

            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM stamp_records
                WHERE user_id=%s
                {order_by}
                LIMIT %s OFFSET %s
                """,
                (user_id, int(page_request.size), int(page_request.offset)),
            )
            items = [_to_record(r) for r in fetchall(cur)]

        return Page(items=items, page=page_request.page, size=page_request.size, total=total)
