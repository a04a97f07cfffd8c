from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Query

from spendwise.core.config import settings
from spendwise.core.dependencies import get_analyzer, get_filter_criteria, get_now, get_store
from spendwise.db.store import ExpenseStore
from spendwise.models.expense import AggregateResult, CategorySlice, FilterCriteria, TrendPoint
from spendwise.utils.analyzer import ExpenseAnalyzer
from spendwise.utils.filters import filter_expenses
from spendwise.utils.trend import daily_trend

router = APIRouter()


@router.get("/summary", response_model=AggregateResult)
def get_summary(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    store: ExpenseStore = Depends(get_store),
    analyzer: ExpenseAnalyzer = Depends(get_analyzer),
    now: datetime = Depends(get_now),
):
    """
    Totals for the filtered expenses. The month-over-month comparison always
    covers every expense, whatever the filters.
    """
    records = store.all()
    return analyzer.aggregate(filter_expenses(records, criteria, now), records, now)


@router.get("/breakdown", response_model=List[CategorySlice])
def get_breakdown(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    store: ExpenseStore = Depends(get_store),
    analyzer: ExpenseAnalyzer = Depends(get_analyzer),
    now: datetime = Depends(get_now),
):
    return analyzer.category_breakdown(filter_expenses(store.all(), criteria, now))


@router.get("/trend", response_model=List[TrendPoint])
def get_trend(
    days: int = Query(settings.TREND_WINDOW_DAYS, ge=1, le=366),
    store: ExpenseStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """Daily totals over every expense for the last `days` days, oldest first."""
    return daily_trend(store.all(), now, window_days=days)
