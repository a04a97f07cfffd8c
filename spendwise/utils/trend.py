from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List

from spendwise.core.exceptions import ValidationError
from spendwise.models.expense import Expense, TrendPoint
from spendwise.utils.filters import Instant, as_local_date

CENT = Decimal("0.01")


def day_label(day: date) -> str:
    """Short axis label, e.g. "Jun 1"."""
    return f"{day.strftime('%b')} {day.day}"


def daily_trend(records: Iterable[Expense], now: Instant, window_days: int = 30) -> List[TrendPoint]:
    """
    One point per calendar day for the window ending today, oldest first.

    Days without expenses are present with a zero amount so the series has no gaps.
    """
    if window_days < 1:
        raise ValidationError("window_days must be at least 1")

    today = as_local_date(now)
    start = today - timedelta(days=window_days - 1)

    per_day: Dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
    for exp in records:
        if start <= exp.date <= today:
            per_day[exp.date] += exp.amount

    points = []
    for offset in range(window_days):
        day = start + timedelta(days=offset)
        points.append(
            TrendPoint(
                date=day,
                label=day_label(day),
                amount=per_day[day].quantize(CENT, rounding=ROUND_HALF_UP),
            )
        )
    return points
