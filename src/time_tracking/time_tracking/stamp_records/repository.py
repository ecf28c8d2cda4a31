from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Page, PageRequest, StampRecord


class StampRecordRepository(Protocol):
    def insert(self, record: StampRecord) -> StampRecord:
        """Persist a new record and return it with the store-assigned id."""

        raise NotImplementedError

    def replace(self, record: StampRecord) -> bool:
        """Overwrite every field of the record with ``record.id``."""

        raise NotImplementedError

    def get_by_id(self, record_id: int) -> Optional[StampRecord]:
        raise NotImplementedError

    def exists_by_id(self, record_id: int) -> bool:
        raise NotImplementedError

    def delete_by_id(self, record_id: int) -> bool:
        raise NotImplementedError

    def latest_by_user(self, user_id: int) -> Optional[StampRecord]:
        """Newest record by check-in time; identical check-ins resolve to the higher id."""

        raise NotImplementedError

    def by_user_and_check_in_range(self, user_id: int, start_millis: int, end_millis: int) -> Sequence[StampRecord]:
        """Records whose check-in lies in ``[start_millis, end_millis]``."""

        raise NotImplementedError

    def page_by_user(self, user_id: int, page_request: PageRequest) -> Page:
        raise NotImplementedError
