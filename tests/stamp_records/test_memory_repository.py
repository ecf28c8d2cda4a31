import threading

import pytest

from src.time_tracking.time_tracking.core.enums import SortDirection
from src.time_tracking.time_tracking.core.exceptions import OpenRecordConflictError
from src.time_tracking.time_tracking.stamp_records.memory_stamp_record_repository import InMemoryStampRecordRepository
from src.time_tracking.time_tracking.stamp_records.model import PageRequest, SortSpec, StampRecord


def _records():
    return [
        StampRecord(id=1000, user_id=0, check_in_millis=1737356400000, check_out_millis=1737399600000),
        StampRecord(id=1001, user_id=0, check_in_millis=1736060400000, check_out_millis=1736074800000),
        StampRecord(id=1002, user_id=0, check_in_millis=1737702000000, check_out_millis=1737730800000),
        StampRecord(id=1003, user_id=1, check_in_millis=1737356400000, check_out_millis=None),
    ]


def test_insert_assigns_increasing_ids_after_seed():
    repo = InMemoryStampRecordRepository(_records())
    saved = repo.insert(StampRecord(id=None, user_id=5, check_in_millis=1, check_out_millis=2))
    assert saved.id == 1004


def test_latest_by_user_orders_by_check_in():
    repo = InMemoryStampRecordRepository(_records())
    assert repo.latest_by_user(0).id == 1002
    assert repo.latest_by_user(42) is None


def test_latest_by_user_tie_goes_to_higher_id():
    repo = InMemoryStampRecordRepository(
        [
            StampRecord(id=1, user_id=3, check_in_millis=500, check_out_millis=None),
            StampRecord(id=2, user_id=3, check_in_millis=500, check_out_millis=600),
        ]
    )
    assert repo.latest_by_user(3).id == 2


def test_range_is_inclusive_and_uses_check_in_only():
    repo = InMemoryStampRecordRepository(_records())
    rows = repo.by_user_and_check_in_range(0, 1737356400000, 1737399600000 + 1)
    assert [r.id for r in rows] == [1000]

    # check-out of 1000 lies past the end, the record still counts
    rows = repo.by_user_and_check_in_range(0, 1737356400000, 1737356400000)
    assert [r.id for r in rows] == [1000]


def test_page_by_user_default_sort_is_newest_first():
    repo = InMemoryStampRecordRepository(_records())
    page = repo.page_by_user(0, PageRequest(page=0, size=2))
    assert [r.id for r in page.items] == [1002, 1000]
    assert page.total == 3

    second = repo.page_by_user(0, PageRequest(page=1, size=2))
    assert [r.id for r in second.items] == [1001]


def test_page_by_user_ascending_sort():
    repo = InMemoryStampRecordRepository(_records())
    page = repo.page_by_user(0, PageRequest(sort=SortSpec(field="check_in_millis", direction=SortDirection.ASC)))
    assert [r.id for r in page.items] == [1001, 1000, 1002]


def test_page_past_the_end_is_empty():
    repo = InMemoryStampRecordRepository(_records())
    assert repo.page_by_user(0, PageRequest(page=5, size=20)).items == []


def test_second_open_record_is_rejected_by_store():
    repo = InMemoryStampRecordRepository(_records())
    with pytest.raises(OpenRecordConflictError):
        repo.insert(StampRecord(id=None, user_id=1, check_in_millis=1737442800000))


def test_replace_into_open_record_conflicts_with_existing_open():
    repo = InMemoryStampRecordRepository(_records())
    closed = repo.insert(StampRecord(id=None, user_id=1, check_in_millis=1, check_out_millis=2))
    with pytest.raises(OpenRecordConflictError):
        repo.replace(StampRecord(id=closed.id, user_id=1, check_in_millis=1, check_out_millis=None))


def test_replace_own_open_record_is_allowed():
    repo = InMemoryStampRecordRepository(_records())
    assert repo.replace(StampRecord(id=1003, user_id=1, check_in_millis=1737356400001, check_out_millis=None))


def test_replace_and_delete_unknown_id():
    repo = InMemoryStampRecordRepository()
    assert repo.replace(StampRecord(id=9, user_id=1, check_in_millis=1, check_out_millis=2)) is False
    assert repo.delete_by_id(9) is False


def test_concurrent_check_ins_leave_one_open_record():
    repo = InMemoryStampRecordRepository()
    outcomes = []

    def check_in(offset):
        try:
            repo.insert(StampRecord(id=None, user_id=7, check_in_millis=1000 + offset))
            outcomes.append("ok")
        except OpenRecordConflictError:
            outcomes.append("conflict")

    threads = [threading.Thread(target=check_in, args=(i,)) for i in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert outcomes.count("ok") == 1
    assert outcomes.count("conflict") == 9


def test_load_rejects_second_open_record_for_user():
    with pytest.raises(OpenRecordConflictError):
        InMemoryStampRecordRepository(
            [
                StampRecord(id=1, user_id=4, check_in_millis=100, check_out_millis=None),
                StampRecord(id=2, user_id=4, check_in_millis=200, check_out_millis=None),
            ]
        )


def test_load_into_existing_store_respects_open_record():
    repo = InMemoryStampRecordRepository(_records())
    with pytest.raises(OpenRecordConflictError):
        repo.load([StampRecord(id=None, user_id=1, check_in_millis=1737442800000)])


def test_reads_while_another_thread_writes():
    repo = InMemoryStampRecordRepository(
        [StampRecord(id=None, user_id=0, check_in_millis=i, check_out_millis=i + 1) for i in range(2000)]
    )
    stop = threading.Event()
    errors = []

    def churn():
        while not stop.is_set():
            saved = repo.insert(StampRecord(id=None, user_id=0, check_in_millis=5000, check_out_millis=5001))
            repo.delete_by_id(saved.id)

    def read():
        try:
            for _ in range(50):
                repo.page_by_user(0, PageRequest(size=10))
                repo.by_user_and_check_in_range(0, 0, 10_000)
                repo.latest_by_user(0)
        except RuntimeError as e:
            errors.append(e)

    writer = threading.Thread(target=churn)
    reader = threading.Thread(target=read)
    writer.start()
    reader.start()
    reader.join()
    stop.set()
    writer.join()

    assert errors == []
    assert repo.page_by_user(0, PageRequest()).total == 2000
