from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .database.connection import DBConfig, DatabaseConnection
from .stamp_records.memory_stamp_record_repository import InMemoryStampRecordRepository
from .stamp_records.mysql_stamp_record_repository import MySQLStampRecordRepository
from .stamp_records.repository import StampRecordRepository
from .stamp_records.service import StampRecordService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    stamp_records_repo: StampRecordRepository

    stamp_record_service: StampRecordService

    default_page_size: int
    max_page_size: int


def build_container(
    *,
    db_config: dict,
    store_backend: str = "mysql",
    default_page_size: int = 20,
    max_page_size: int = 200,
) -> Container:
    backend = store_backend.lower()
    conn: Optional[DatabaseConnection] = None

    if backend == "mysql":
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        stamp_records_repo: StampRecordRepository = MySQLStampRecordRepository(conn)
    elif backend == "memory":
        stamp_records_repo = InMemoryStampRecordRepository()
    else:
        raise ValueError(f"Unknown STORE_BACKEND: {store_backend!r}")

    stamp_record_service = StampRecordService(stamp_records_repo)

    return Container(
        conn=conn,
        stamp_records_repo=stamp_records_repo,
        stamp_record_service=stamp_record_service,
        default_page_size=int(default_page_size),
        max_page_size=int(max_page_size),
    )
