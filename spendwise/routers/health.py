"""
Health Check Router
Simple health check endpoint
"""
from datetime import datetime

from fastapi import APIRouter, Depends

from spendwise.core.config import settings
from spendwise.core.dependencies import get_store
from spendwise.db.store import ExpenseStore

router = APIRouter()


@router.get("/health")
async def health_check(store: ExpenseStore = Depends(get_store)):
    """
    Health check endpoint.
    Returns API status and the size of the record store.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "expenses": store.count(),
        "amount_policy": store.amount_policy.value,
        "timestamp": datetime.now().isoformat(),
    }
