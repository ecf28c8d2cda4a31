from __future__ import annotations

import threading
from typing import Optional, Sequence

from ..core.enums import SortDirection
from ..core.exceptions import OpenRecordConflictError, StoreError
from .model import Page, PageRequest, SortSpec, StampRecord
from .repository import StampRecordRepository


def _sort_key(field: str):
    # None sorts before any timestamp; id breaks ties.
    def key(r: StampRecord):
        value = getattr(r, field)
        return (value is not None, value if value is not None else 0, r.id)

    return key


def sort_records(records: Sequence[StampRecord], sort: SortSpec) -> list[StampRecord]:
    return sorted(records, key=_sort_key(sort.field), reverse=sort.direction == SortDirection.DESC)


class InMemoryStampRecordRepository(StampRecordRepository):
    """Dict-backed store for tests and local runs.

    Every access holds a lock: writes run the open-record check and the write
    as one step, mirroring the unique index of the MySQL table, and reads work
    on a snapshot taken under the lock.
    """

    def __init__(self, records: Sequence[StampRecord] = ()):
        self._lock = threading.Lock()
        self._by_id: dict[int, StampRecord] = {}
        self._next_id = 1
        self.load(records)

    def load(self, records: Sequence[StampRecord]) -> None:
        """Add records as-is; ones without id get the next free id."""
        with self._lock:
            for r in records:
                self._ensure_single_open(r)
                if r.id is None:
                    self._insert_locked(r)
                else:
                    self._by_id[int(r.id)] = r
                    self._next_id = max(self._next_id, int(r.id) + 1)

    def _ensure_single_open(self, record: StampRecord) -> None:
        if not record.is_open:
            return
        for other in self._by_id.values():
            if other.id != record.id and other.user_id == record.user_id and other.is_open:
                raise OpenRecordConflictError(f"User {record.user_id} already has an open record")

    def _insert_locked(self, record: StampRecord) -> StampRecord:
        saved = StampRecord(
            id=self._next_id,
            user_id=record.user_id,
            check_in_millis=record.check_in_millis,
            check_out_millis=record.check_out_millis,
        )
        self._by_id[saved.id] = saved
        self._next_id += 1
        return saved

    def insert(self, record: StampRecord) -> StampRecord:
        with self._lock:
            self._ensure_single_open(record)
            return self._insert_locked(record)

    def replace(self, record: StampRecord) -> bool:
        if record.id is None:
            raise StoreError("Cannot replace a record without id")
        with self._lock:
            if record.id not in self._by_id:
                return False
            self._ensure_single_open(record)
            self._by_id[record.id] = record
            return True

    def get_by_id(self, record_id: int) -> Optional[StampRecord]:
        with self._lock:
            return self._by_id.get(int(record_id))

    def exists_by_id(self, record_id: int) -> bool:
        with self._lock:
            return int(record_id) in self._by_id

    def delete_by_id(self, record_id: int) -> bool:
        with self._lock:
            return self._by_id.pop(int(record_id), None) is not None

    def latest_by_user(self, user_id: int) -> Optional[StampRecord]:
        items = sort_records(self._for_user(user_id), SortSpec())
        return items[0] if items else None

    def by_user_and_check_in_range(self, user_id: int, start_millis: int, end_millis: int) -> Sequence[StampRecord]:
        items = [r for r in self._for_user(user_id) if start_millis <= r.check_in_millis <= end_millis]
        return sort_records(items, SortSpec(direction=SortDirection.ASC))

    def page_by_user(self, user_id: int, page_request: PageRequest) -> Page:
        items = sort_records(self._for_user(user_id), page_request.sort)
        start = page_request.offset
        return Page(
            items=items[start : start + page_request.size],
            page=page_request.page,
            size=page_request.size,
            total=len(items),
        )

    def _for_user(self, user_id: int) -> list[StampRecord]:
        with self._lock:
            values = list(self._by_id.values())
        return [r for r in values if r.user_id == user_id]
