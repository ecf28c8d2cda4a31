from datetime import timedelta

import pytest

from src.time_tracking.time_tracking.core.exceptions import NegativeWorkedTimeError
from src.time_tracking.time_tracking.stamp_records.breaks.standard_calculator import (
    BreakRule,
    StandardBreakCalculator,
)


@pytest.mark.parametrize(
    "checked_in, expected",
    [
        (timedelta(hours=9), timedelta(hours=8, minutes=15)),
        (timedelta(hours=6), timedelta(hours=5, minutes=30)),
        (timedelta(hours=8, minutes=59, seconds=59), timedelta(hours=8, minutes=29, seconds=59)),
        (timedelta(hours=5, minutes=59, seconds=59), timedelta(hours=5, minutes=59, seconds=59)),
        (timedelta(hours=12), timedelta(hours=11, minutes=15)),
        (timedelta(hours=4), timedelta(hours=4)),
        (timedelta(0), timedelta(0)),
    ],
)
def test_standard_breaks(checked_in, expected):
    assert StandardBreakCalculator().worked_time(checked_in) == expected


def test_deduction_brackets():
    calc = StandardBreakCalculator()
    assert calc.break_deduction(timedelta(hours=10)) == timedelta(minutes=45)
    assert calc.break_deduction(timedelta(hours=7)) == timedelta(minutes=30)
    assert calc.break_deduction(timedelta(hours=1)) == timedelta(0)


def test_rules_are_checked_longest_first_regardless_of_order():
    rules = [
        BreakRule(threshold=timedelta(hours=6), deduction=timedelta(minutes=30)),
        BreakRule(threshold=timedelta(hours=9), deduction=timedelta(minutes=45)),
    ]
    calc = StandardBreakCalculator(rules)
    assert calc.break_deduction(timedelta(hours=9, minutes=30)) == timedelta(minutes=45)


def test_negative_worked_time_is_an_error_not_clamped():
    calc = StandardBreakCalculator([BreakRule(threshold=timedelta(minutes=10), deduction=timedelta(minutes=30))])
    with pytest.raises(NegativeWorkedTimeError):
        calc.worked_time(timedelta(minutes=20))
