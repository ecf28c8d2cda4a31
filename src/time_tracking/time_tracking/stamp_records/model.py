from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.constants import DEFAULT_PAGE_SIZE, DEFAULT_SORT_FIELD
from ..core.enums import SortDirection


@dataclass(frozen=True)
class StampRecord:
    """Domain entity: one check-in/check-out event of a user."""

    id: Optional[int]
    user_id: Optional[int]
    check_in_millis: Optional[int]
    check_out_millis: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.check_out_millis is None


@dataclass(frozen=True)
class SortSpec:
    field: str = DEFAULT_SORT_FIELD
    direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class PageRequest:
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE
    sort: SortSpec = field(default_factory=SortSpec)

    @property
    def offset(self) -> int:
        return self.page * self.size


@dataclass(frozen=True)
class Page:
    """Read-model for paged listings."""

    items: list[StampRecord]
    page: int
    size: int
    total: int
