from __future__ import annotations

from enum import Enum


class SortDirection(str, Enum):
    """Sort direction accepted by paged queries."""

    ASC = "asc"
    DESC = "desc"
