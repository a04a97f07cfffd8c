from datetime import datetime

from fastapi import HTTPException, Query, Request, status
from pydantic import ValidationError as PydanticValidationError

from spendwise.db.store import ExpenseStore
from spendwise.models.expense import DateRange, FilterCriteria
from spendwise.utils.analyzer import ExpenseAnalyzer
from spendwise.utils.insights import InsightClient, InsightConversation

analyzer = ExpenseAnalyzer()


def get_store(request: Request) -> ExpenseStore:
    return request.app.state.store


def get_insight_client(request: Request) -> InsightClient:
    return request.app.state.insight_client


def get_conversation(request: Request) -> InsightConversation:
    return request.app.state.conversation


def get_analyzer() -> ExpenseAnalyzer:
    return analyzer


def get_now() -> datetime:
    """The reference instant for one request; read once, passed to every engine."""
    return datetime.now()


def get_filter_criteria(
    category: str = Query("all"),
    date_range: DateRange = Query(DateRange.ALL),
    search: str = Query(""),
) -> FilterCriteria:
    try:
        return FilterCriteria(category=category, date_range=date_range, search_text=search)
    except PydanticValidationError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown category: {category}")
