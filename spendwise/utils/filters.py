"""
Filter engine: category, date window and free-text criteria, applied conjunctively.
"""
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple, Union

from spendwise.models.expense import DateRange, Expense, FilterCriteria

Instant = Union[date, datetime]


def as_local_date(now: Instant) -> date:
    if isinstance(now, datetime):
        return now.date()
    return now


def resolve_date_window(date_range: DateRange, now: Instant) -> Optional[Tuple[date, date]]:
    """
    Inclusive (start, end) dates for a date range, or None when unbounded.

    "week" starts on the most recent Sunday, "month" on the first of the month.
    """
    today = as_local_date(now)
    date_range = DateRange(date_range)
    if date_range is DateRange.ALL:
        return None
    if date_range is DateRange.WEEK:
        # weekday(): Monday == 0 ... Sunday == 6
        days_since_sunday = (today.weekday() + 1) % 7
        return today - timedelta(days=days_since_sunday), today
    return today.replace(day=1), today


def matches_category(expense: Expense, category) -> bool:
    return category == "all" or expense.category == category


def matches_window(expense: Expense, window: Optional[Tuple[date, date]]) -> bool:
    if window is None:
        return True
    start, end = window
    return start <= expense.date <= end


def matches_search(expense: Expense, search_text: str) -> bool:
    if not search_text:
        return True
    needle = search_text.lower()
    return needle in expense.notes.lower() or needle in expense.category.value.lower()


def filter_expenses(
    records: Iterable[Expense],
    criteria: FilterCriteria,
    now: Instant,
) -> List[Expense]:
    """Records passing every criterion, in their input order."""
    window = resolve_date_window(criteria.date_range, now)
    return [
        exp
        for exp in records
        if matches_category(exp, criteria.category)
        and matches_window(exp, window)
        and matches_search(exp, criteria.search_text)
    ]
