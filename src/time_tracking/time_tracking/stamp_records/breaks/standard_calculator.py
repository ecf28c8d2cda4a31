from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Sequence

from .base import BreakCalculator


@dataclass(frozen=True)
class BreakRule:
    threshold: timedelta
    deduction: timedelta


BIG_BREAK = BreakRule(threshold=timedelta(hours=9), deduction=timedelta(minutes=45))
SMALL_BREAK = BreakRule(threshold=timedelta(hours=6), deduction=timedelta(minutes=30))

# Longest threshold first.
STANDARD_BREAK_RULES: tuple[BreakRule, ...] = (BIG_BREAK, SMALL_BREAK)


class StandardBreakCalculator(BreakCalculator):
    """Standard rule: 45 min off from 9h on, 30 min off from 6h on, nothing below.

    Thresholds are inclusive, so exactly 9h00m00s already gets the big break.
    """

    def __init__(self, rules: Sequence[BreakRule] = STANDARD_BREAK_RULES):
        self._rules = tuple(sorted(rules, key=lambda r: r.threshold, reverse=True))

    def break_deduction(self, checked_in: timedelta) -> timedelta:
        for rule in self._rules:
            if checked_in >= rule.threshold:
                return rule.deduction
        return timedelta(0)
