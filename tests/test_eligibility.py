from __future__ import annotations

from datetime import date, timedelta

import pytest

from app.payouts.eligibility import SUNDAY, is_due

SUNDAY_THE_18TH = date(2026, 10, 18)
MONDAY = date(2026, 10, 19)
FIRST_ON_A_SUNDAY = date(2026, 11, 1)
FIRST_ON_A_TUESDAY = date(2026, 12, 1)


def test_monthly_due_only_on_the_first():
    assert is_due("monthly", FIRST_ON_A_TUESDAY)
    assert is_due("monthly", FIRST_ON_A_SUNDAY)
    assert not is_due("monthly", SUNDAY_THE_18TH)
    assert not is_due("monthly", date(2026, 12, 2))
    assert not is_due("monthly", date(2026, 12, 31))


def test_monthly_every_day_of_a_month():
    start = date(2027, 2, 1)
    due = [start + timedelta(days=i) for i in range(28) if is_due("monthly", start + timedelta(days=i))]
    assert due == [start]


def test_weekly_due_on_default_sunday_anchor():
    assert SUNDAY == 6
    assert is_due("weekly", SUNDAY_THE_18TH)
    assert is_due("weekly", FIRST_ON_A_SUNDAY)
    assert not is_due("weekly", MONDAY)
    assert not is_due("weekly", FIRST_ON_A_TUESDAY)


def test_weekly_exactly_once_per_week():
    days = [MONDAY + timedelta(days=i) for i in range(7)]
    assert sum(is_due("weekly", d) for d in days) == 1


def test_weekly_respects_configured_anchor():
    assert is_due("weekly", MONDAY, weekly_anchor=0)
    assert not is_due("weekly", SUNDAY_THE_18TH, weekly_anchor=0)


@pytest.mark.parametrize("frequency", ["daily", "Weekly", "MONTHLY", "", None, "biweekly"])
def test_unknown_frequency_fails_closed(frequency):
    for d in (SUNDAY_THE_18TH, FIRST_ON_A_SUNDAY, FIRST_ON_A_TUESDAY, MONDAY):
        assert not is_due(frequency, d)
