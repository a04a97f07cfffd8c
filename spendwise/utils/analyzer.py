from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from spendwise.core.exceptions import NoBaselineError
from spendwise.models.expense import (
    CATEGORY_COLORS,
    CATEGORY_ORDER,
    AggregateResult,
    Category,
    CategorySlice,
    Expense,
)
from spendwise.utils.filters import Instant, as_local_date

ZERO = Decimal("0")
CENT = Decimal("0.01")
TENTH = Decimal("0.1")


def sort_recent(expenses: Iterable[Expense]) -> List[Expense]:
    """Newest date first; same-day records newest insertion first."""
    return sorted(expenses, key=lambda exp: (exp.date, exp.seq), reverse=True)


def month_bounds(now: Instant) -> Tuple[date, date, date, date]:
    """(current start, current end, previous start, previous end), all inclusive."""
    today = as_local_date(now)
    current_start = today.replace(day=1)
    previous_end = current_start - timedelta(days=1)
    previous_start = previous_end.replace(day=1)
    return current_start, today, previous_start, previous_end


class ExpenseAnalyzer:
    """
    Aggregation engine shared by the reports and insight routes.

    Every method is pure: it reads the records it is given and the explicit
    reference instant, never the store or the wall clock.
    """

    def grand_total(self, expenses: Iterable[Expense]) -> Decimal:
        return sum((exp.amount for exp in expenses), ZERO)

    def category_totals(self, expenses: Iterable[Expense]) -> Dict[str, Decimal]:
        totals: Dict[Category, Decimal] = defaultdict(lambda: ZERO)
        for exp in expenses:
            totals[exp.category] += exp.amount
        return {cat.value: totals[cat] for cat in CATEGORY_ORDER if cat in totals}

    def average(self, expenses: Sequence[Expense]) -> Decimal:
        if not expenses:
            return ZERO
        return self.grand_total(expenses) / len(expenses)

    def top_category(self, category_totals: Dict[str, Decimal]) -> Optional[Category]:
        top: Optional[Category] = None
        for cat in CATEGORY_ORDER:
            if cat.value not in category_totals:
                continue
            # strict comparison keeps the earlier category on ties
            if top is None or category_totals[cat.value] > category_totals[top.value]:
                top = cat
        return top

    def total_between(self, expenses: Iterable[Expense], start: date, end: date) -> Decimal:
        return sum((exp.amount for exp in expenses if start <= exp.date <= end), ZERO)

    def month_to_date_total(self, expenses: Iterable[Expense], now: Instant) -> Decimal:
        start, end, _, _ = month_bounds(now)
        return self.total_between(expenses, start, end)

    def previous_month_total(self, expenses: Iterable[Expense], now: Instant) -> Decimal:
        _, _, start, end = month_bounds(now)
        return self.total_between(expenses, start, end)

    def month_over_month(self, current: Decimal, previous: Decimal) -> Decimal:
        """
        Signed percentage change from previous to current.

        Raises NoBaselineError when there is nothing to compare against.
        """
        if previous == 0:
            raise NoBaselineError("previous month total is zero")
        change = (current - previous) / previous * 100
        return change.quantize(CENT, rounding=ROUND_HALF_UP)

    def category_breakdown(self, expenses: Sequence[Expense]) -> List[CategorySlice]:
        totals = self.category_totals(expenses)
        grand_total = sum(totals.values(), ZERO)
        if grand_total == 0:
            return []
        return [
            CategorySlice(
                name=Category(name),
                value=amount,
                percentage=str((amount / grand_total * 100).quantize(TENTH, rounding=ROUND_HALF_UP)),
                color=CATEGORY_COLORS[Category(name)],
            )
            for name, amount in totals.items()
        ]

    def recent(self, expenses: Iterable[Expense], limit: int = 5) -> List[Expense]:
        return sort_recent(expenses)[:limit]

    def aggregate(
        self,
        expenses: Sequence[Expense],
        all_expenses: Iterable[Expense],
        now: Instant,
    ) -> AggregateResult:
        """
        Summarize a (usually filtered) record subset.

        The month comparison always uses all_expenses, not the subset.
        """
        all_expenses = list(all_expenses)
        totals = self.category_totals(expenses)
        current = self.month_to_date_total(all_expenses, now)
        previous = self.previous_month_total(all_expenses, now)
        try:
            change: Optional[Decimal] = self.month_over_month(current, previous)
        except NoBaselineError:
            change = None

        return AggregateResult(
            category_totals=totals,
            grand_total=self.grand_total(expenses),
            count=len(expenses),
            average=self.average(expenses),
            top_category=self.top_category(totals),
            month_to_date_total=current,
            previous_month_total=previous,
            month_over_month_change_percent=change,
            has_baseline=change is not None,
        )
