"""Example: use the service layer directly (no Flask).

Controllers stay thin; the accounting rules live in StampRecordService.
"""

from src.time_tracking.time_tracking.container import build_container
from src.time_tracking.time_tracking.stamp_records.model import StampRecord


def main():
    container = build_container(db_config={}, store_backend="memory")
    service = container.stamp_record_service

    record = service.create(StampRecord(id=None, user_id=1, check_in_millis=1737356400000, check_out_millis=1737399600000))
    print("checked in now:", service.is_checked_in(1))
    print("checked-in time:", service.checked_in_duration(record.id))
    print("worked time:", service.hours_worked(record.id))


if __name__ == "__main__":
    main()
