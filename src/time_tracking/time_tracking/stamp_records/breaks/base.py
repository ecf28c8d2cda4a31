from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import timedelta

from ...core.exceptions import NegativeWorkedTimeError


class BreakCalculator(ABC):
    """Calculator interface (Strategy Pattern for break deduction)."""

    @abstractmethod
    def break_deduction(self, checked_in: timedelta) -> timedelta:
        raise NotImplementedError

    def worked_time(self, checked_in: timedelta) -> timedelta:
        worked = checked_in - self.break_deduction(checked_in)
        if worked < timedelta(0):
            raise NegativeWorkedTimeError(
                f"Break deduction exceeds checked-in time ({checked_in})"
            )
        return worked
