import pytest

from src.time_tracking.time_tracking.container import build_container
from src.time_tracking.time_tracking.stamp_records.memory_stamp_record_repository import InMemoryStampRecordRepository
from src.time_tracking.time_tracking.stamp_records.mysql_stamp_record_repository import MySQLStampRecordRepository

DB_CONFIG = {"host": "localhost", "port": 3306, "user": "root", "password": "", "database": "time_tracking_test"}


def test_memory_backend():
    container = build_container(db_config=DB_CONFIG, store_backend="memory")
    assert isinstance(container.stamp_records_repo, InMemoryStampRecordRepository)
    assert container.conn is None


def test_mysql_backend_does_not_connect_eagerly():
    container = build_container(db_config=DB_CONFIG, store_backend="MySQL")
    assert isinstance(container.stamp_records_repo, MySQLStampRecordRepository)
    assert container.conn is not None


def test_unknown_backend():
    with pytest.raises(ValueError):
        build_container(db_config=DB_CONFIG, store_backend="redis")
