"""
Insight Service
Formats a user's question plus the filtered expenses for the external analysis
agent, sends it, and turns whatever comes back into a chat reply.
"""
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from uuid import uuid4

import httpx

from spendwise.core.exceptions import ExternalServiceError, ValidationError
from spendwise.models.expense import ChatMessage, Expense, InsightRequest

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Sorry, I encountered an error analyzing your expenses. Please try again."

SUGGESTED_QUESTIONS = [
    "Show me this week's spending summary",
    "What did I spend the most on this month?",
    "How can I reduce my expenses?",
    "Give me budget recommendations",
    "Compare this month vs last month",
]


def _json_default(value: Any):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def insight_records(records: Iterable[Expense]) -> List[Dict[str, Any]]:
    return [
        {
            "amount": exp.amount,
            "category": exp.category.value,
            "date": exp.date.isoformat(),
            "notes": exp.notes,
        }
        for exp in records
    ]


def build_insight_message(question: str, records: Iterable[Expense]) -> str:
    expense_data = json.dumps(insight_records(records), default=_json_default, separators=(",", ":"))
    return f'User query: "{question}"\n\nExpense data: {expense_data}'


def build_insight_request(question: str, records: Iterable[Expense], agent_id: str) -> InsightRequest:
    return InsightRequest(message=build_insight_message(question, records), agent_id=agent_id)


def extract_reply(payload: Any) -> str:
    """
    Pick the text to show from an agent response body.

    Plain text is used as is; structured answers prefer summary, then
    detailed_analysis, then the whole object dumped as JSON.
    """
    if not isinstance(payload, dict):
        raise ExternalServiceError(f"Expected a JSON object, got {type(payload).__name__}")
    if not payload.get("success"):
        raise ExternalServiceError("Agent reported an unsuccessful response")

    response = payload.get("response")
    if isinstance(response, str):
        if not response:
            raise ExternalServiceError("Agent returned an empty response")
        return response
    if isinstance(response, dict):
        for key in ("summary", "detailed_analysis"):
            value = response.get(key)
            if value is not None:
                return value if isinstance(value, str) else json.dumps(value, default=_json_default)
        return json.dumps(response, default=_json_default)
    raise ExternalServiceError(f"Unexpected response type: {type(response).__name__}")


class InsightClient:
    """
    Sends one independent request per question; no retry, no queueing.
    Failures never escape ask(): they are logged and replaced by FALLBACK_MESSAGE.
    """

    def __init__(
        self,
        url: str,
        agent_id: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.agent_id = agent_id
        self._timeout = timeout
        self._transport = transport

    async def ask(self, question: str, records: Iterable[Expense]) -> str:
        try:
            return await self.request_reply(question, records)
        except ExternalServiceError as e:
            logger.error(f"Insight request failed: {str(e)}")
            return FALLBACK_MESSAGE

    async def request_reply(self, question: str, records: Iterable[Expense]) -> str:
        request = build_insight_request(question, records, self.agent_id)
        logger.info(f"Sending insight request to {self.url} (agent {self.agent_id})")
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self.url, json=request.model_dump())
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Agent returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Agent unreachable: {str(e)}") from e
        except ValueError as e:
            raise ExternalServiceError(f"Agent returned malformed JSON: {str(e)}") from e
        return extract_reply(payload)


class InsightConversation:
    """Chat log for the insight panel, one per app instance."""

    def __init__(self) -> None:
        self._messages: List[ChatMessage] = []

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    def append(self, role: str, content: str, timestamp: datetime) -> ChatMessage:
        message = ChatMessage(id=uuid4().hex[:12], role=role, content=content, timestamp=timestamp)
        self._messages.append(message)
        return message

    async def ask(
        self,
        client: InsightClient,
        question: str,
        records: Iterable[Expense],
        now: datetime,
    ) -> ChatMessage:
        """Record the question and exactly one agent reply (or the fallback)."""
        if not question or not question.strip():
            raise ValidationError("question must not be empty")
        records = list(records)
        self.append("user", question, now)
        reply = await client.ask(question, records)
        return self.append("agent", reply, datetime.now())
