from __future__ import annotations

from ..core.exceptions import InvalidRecordError
from .model import StampRecord


def is_valid_stamp_record(record: StampRecord) -> bool:
    # A record with only a check-out, or without an owner, means nothing.
    if record.user_id is None:
        return False
    if record.check_in_millis is None:
        return False
    if record.check_out_millis is not None:
        return record.check_in_millis < record.check_out_millis
    return True


def require_valid_stamp_record(record: StampRecord) -> StampRecord:
    if not is_valid_stamp_record(record):
        raise InvalidRecordError("Stamp record is not valid")
    return record
