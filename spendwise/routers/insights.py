"""
Insights Router
Chat with the external analysis agent about the currently filtered expenses
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from spendwise.core.dependencies import get_conversation, get_insight_client, get_now, get_store
from spendwise.core.exceptions import ValidationError
from spendwise.db.store import ExpenseStore
from spendwise.models.expense import ChatMessage, FilterCriteria, InsightQuestion
from spendwise.utils.filters import filter_expenses
from spendwise.utils.insights import SUGGESTED_QUESTIONS, InsightClient, InsightConversation

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/ask", response_model=ChatMessage)
async def ask_question(
    body: InsightQuestion,
    store: ExpenseStore = Depends(get_store),
    client: InsightClient = Depends(get_insight_client),
    conversation: InsightConversation = Depends(get_conversation),
    now: datetime = Depends(get_now),
):
    """
    Send the question plus every expense passing the given filters to the agent.
    Always answers with the agent's reply or a fallback message.
    """
    criteria = FilterCriteria(category=body.category, date_range=body.date_range, search_text=body.search)
    records = filter_expenses(store.all(), criteria, now)
    logger.info(f"Insight question over {len(records)} expenses")
    try:
        return await conversation.ask(client, body.question, records, now)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.get("/messages", response_model=List[ChatMessage])
def list_messages(conversation: InsightConversation = Depends(get_conversation)):
    return conversation.messages


@router.get("/suggestions")
def list_suggestions():
    return {"suggestions": SUGGESTED_QUESTIONS}
