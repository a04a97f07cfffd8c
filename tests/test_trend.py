from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from spendwise.core.exceptions import ValidationError
from spendwise.models.expense import Category, Expense
from spendwise.utils.trend import daily_trend

NOW = datetime(2024, 6, 15, 23, 59)


def make_expense(id, amount, day):
    return Expense(id=id, amount=Decimal(amount), category=Category.FOOD, date=day)


def test_trend_always_has_window_days_entries():
    points = daily_trend([], NOW)
    assert len(points) == 30
    assert all(point.amount == 0 for point in points)


def test_trend_is_strictly_ascending_and_ends_today():
    points = daily_trend([make_expense("1", "5", date(2024, 6, 1))], NOW, window_days=30)
    days = [point.date for point in points]
    assert days[0] == date(2024, 5, 17)
    assert days[-1] == date(2024, 6, 15)
    assert all(later - earlier == timedelta(days=1) for earlier, later in zip(days, days[1:]))
    assert len(set(days)) == 30


def test_trend_sums_each_day_and_skips_out_of_window_records():
    records = [
        make_expense("1", "12.5", date(2024, 6, 15)),
        make_expense("2", "7.25", date(2024, 6, 15)),
        make_expense("3", "40", date(2024, 6, 10)),
        make_expense("4", "99", date(2024, 5, 16)),
        make_expense("5", "99", date(2024, 6, 16)),
    ]
    by_day = {point.date: point.amount for point in daily_trend(records, NOW)}
    assert by_day[date(2024, 6, 15)] == Decimal("19.75")
    assert by_day[date(2024, 6, 10)] == Decimal("40")
    assert sum(by_day.values()) == Decimal("59.75")


def test_trend_rounds_half_up_to_cents():
    records = [make_expense("1", "1.005", date(2024, 6, 14)), make_expense("2", "2.125", date(2024, 6, 13))]
    by_day = {point.date: point.amount for point in daily_trend(records, NOW, window_days=7)}
    assert by_day[date(2024, 6, 14)] == Decimal("1.01")
    assert by_day[date(2024, 6, 13)] == Decimal("2.13")


def test_trend_labels_are_short_dates():
    points = daily_trend([], date(2024, 6, 1), window_days=2)
    assert [point.label for point in points] == ["May 31", "Jun 1"]


def test_trend_rejects_empty_window():
    with pytest.raises(ValidationError):
        daily_trend([], NOW, window_days=0)
