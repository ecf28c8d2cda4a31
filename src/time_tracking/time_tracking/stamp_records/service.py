from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import millis_to_timedelta
from ..core.exceptions import (
    AlreadyCheckedInError,
    NotFoundError,
    OpenRecordConflictError,
    RecordStillOpenError,
)
from .breaks.base import BreakCalculator
from .breaks.standard_calculator import StandardBreakCalculator
from .model import Page, PageRequest, StampRecord
from .repository import StampRecordRepository
from .validator import require_valid_stamp_record

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkedTime:
    checked_in: timedelta
    break_deduction: timedelta
    worked: timedelta


class StampRecordService:
    """Check-in status and worked-time accounting over a record store.

    The service keeps no state of its own; every answer is derived from what
    the repository returns. Store failures propagate untouched.
    """

    def __init__(
        self,
        records: StampRecordRepository,
        *,
        calculator: Optional[BreakCalculator] = None,
    ):
        self._records = records
        self._calculator = calculator or StandardBreakCalculator()

    def is_checked_in(self, user_id: int) -> bool:
        latest = self._records.latest_by_user(user_id)
        if latest is None:
            return False
        return latest.is_open

    def records_in_check_in_range(self, user_id: int, start_millis: int, end_millis: int) -> Sequence[StampRecord]:
        # A record belongs to the range its check-in falls in, wherever it ends.
        logger.debug("Range lookup user=%s [%s, %s]", user_id, start_millis, end_millis)
        return self._records.by_user_and_check_in_range(user_id, start_millis, end_millis)

    def get(self, record_id: int) -> StampRecord:
        record = self._records.get_by_id(record_id)
        if record is None:
            raise NotFoundError(f"StampRecord with id {record_id} not found")
        return record

    def list_for_user(self, user_id: int, page_request: PageRequest) -> Page:
        return self._records.page_by_user(user_id, page_request)

    def checked_in_duration(self, record_id: int) -> timedelta:
        """Time between check-in and check-out of a closed record.

        Raises NotFoundError for an unknown id and RecordStillOpenError when
        the record has no check-out yet; callers must only ask for closed
        records.
        """
        record = self.get(record_id)
        if record.is_open:
            raise RecordStillOpenError(f"StampRecord with id {record_id} has no check-out")
        return millis_to_timedelta(record.check_out_millis - record.check_in_millis)

    def hours_worked(self, record_id: int) -> timedelta:
        return self._calculator.worked_time(self.checked_in_duration(record_id))

    def worked_time(self, record_id: int) -> WorkedTime:
        checked_in = self.checked_in_duration(record_id)
        return WorkedTime(
            checked_in=checked_in,
            break_deduction=self._calculator.break_deduction(checked_in),
            worked=self._calculator.worked_time(checked_in),
        )

    def create(self, record: StampRecord) -> StampRecord:
        require_valid_stamp_record(record)
        if self.is_checked_in(record.user_id):
            raise AlreadyCheckedInError(f"User {record.user_id} is already checked in")

        try:
            saved = self._records.insert(
                StampRecord(
                    id=None,
                    user_id=record.user_id,
                    check_in_millis=record.check_in_millis,
                    check_out_millis=record.check_out_millis,
                )
            )
        except OpenRecordConflictError as e:
            # Lost a race against a concurrent check-in for the same user.
            raise AlreadyCheckedInError(f"User {record.user_id} is already checked in") from e

        logger.info("Created stamp record id=%s user=%s", saved.id, saved.user_id)
        return saved

    def update(self, record_id: int, changed: StampRecord) -> StampRecord:
        if not self._records.exists_by_id(record_id):
            raise NotFoundError(f"StampRecord with id {record_id} not found")
        require_valid_stamp_record(changed)

        replacement = StampRecord(
            id=record_id,
            user_id=changed.user_id,
            check_in_millis=changed.check_in_millis,
            check_out_millis=changed.check_out_millis,
        )
        try:
            replaced = self._records.replace(replacement)
        except OpenRecordConflictError as e:
            raise AlreadyCheckedInError(f"User {changed.user_id} is already checked in") from e
        if not replaced:
            raise NotFoundError(f"StampRecord with id {record_id} not found")

        logger.info("Replaced stamp record id=%s", record_id)
        return replacement

    def delete(self, record_id: int) -> None:
        if not self._records.exists_by_id(record_id):
            raise NotFoundError(f"StampRecord with id {record_id} not found")
        self._records.delete_by_id(record_id)
        logger.info("Deleted stamp record id=%s", record_id)
