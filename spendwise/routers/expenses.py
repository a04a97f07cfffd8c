from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from spendwise.core.config import settings
from spendwise.core.dependencies import get_analyzer, get_filter_criteria, get_now, get_store
from spendwise.core.exceptions import NotFoundError, ValidationError
from spendwise.db.store import ExpenseStore
from spendwise.models.expense import Expense, ExpenseCreate, ExpenseUpdate, FilterCriteria
from spendwise.utils.analyzer import ExpenseAnalyzer, sort_recent
from spendwise.utils.filters import filter_expenses

router = APIRouter()


@router.post("/", response_model=Expense, status_code=status.HTTP_201_CREATED)
def create_expense(expense: ExpenseCreate, store: ExpenseStore = Depends(get_store)):
    try:
        return store.create(expense)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/", response_model=List[Expense])
def list_expenses(
    criteria: FilterCriteria = Depends(get_filter_criteria),
    store: ExpenseStore = Depends(get_store),
    now: datetime = Depends(get_now),
):
    """
    Expenses matching every filter, newest first.
    Example: /api/expenses/?category=Food&date_range=month&search=dinner
    """
    return sort_recent(filter_expenses(store.all(), criteria, now))


@router.get("/recent", response_model=List[Expense])
def recent_expenses(
    limit: int = Query(settings.RECENT_LIMIT, ge=1),
    criteria: FilterCriteria = Depends(get_filter_criteria),
    store: ExpenseStore = Depends(get_store),
    analyzer: ExpenseAnalyzer = Depends(get_analyzer),
    now: datetime = Depends(get_now),
):
    return analyzer.recent(filter_expenses(store.all(), criteria, now), limit=limit)


@router.get("/{expense_id}", response_model=Expense)
def get_expense(expense_id: str, store: ExpenseStore = Depends(get_store)):
    try:
        return store.get(expense_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")


@router.put("/{expense_id}", response_model=Expense)
def update_expense(
    expense_id: str,
    expense: ExpenseUpdate,
    store: ExpenseStore = Depends(get_store),
):
    try:
        return store.update(expense_id, expense)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(expense_id: str, store: ExpenseStore = Depends(get_store)):
    try:
        store.delete(expense_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Expense not found")
    return None
