import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Decimal in Python, plain JSON number on the wire.
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class Category(str, Enum):
    FOOD = "Food"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    BILLS = "Bills"
    ENTERTAINMENT = "Entertainment"
    HEALTH = "Health"
    OTHER = "Other"


# Declared order, used for tie-breaks and for ordering category totals.
CATEGORY_ORDER: List[Category] = list(Category)

CATEGORY_COLORS: Dict[Category, str] = {
    Category.FOOD: "#ff6b6b",
    Category.TRANSPORT: "#4ecdc4",
    Category.SHOPPING: "#ff9f43",
    Category.BILLS: "#34495e",
    Category.ENTERTAINMENT: "#a29bfe",
    Category.HEALTH: "#00b894",
    Category.OTHER: "#95a5a6",
}


class AmountPolicy(str, Enum):
    """How the store treats negative amounts."""

    REJECT_NEGATIVE = "reject"
    NET_REFUNDS = "refund"


class DateRange(str, Enum):
    ALL = "all"
    WEEK = "week"
    MONTH = "month"


class ExpenseBase(BaseModel):
    amount: Money
    category: Category
    date: dt.date
    notes: str = ""

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, value):
        return "" if value is None else value


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseUpdate(ExpenseBase):
    """Full replacement of an expense; every field is resupplied."""


class Expense(ExpenseBase):
    model_config = ConfigDict(frozen=True)

    id: str
    # Insertion sequence, breaks date ties in the recent view.
    seq: int = Field(default=0, exclude=True)


class FilterCriteria(BaseModel):
    category: Union[Literal["all"], Category] = "all"
    date_range: DateRange = DateRange.ALL
    search_text: str = ""


class AggregateResult(BaseModel):
    category_totals: Dict[str, Money]
    grand_total: Money
    count: int
    average: Money
    top_category: Optional[Category] = None
    month_to_date_total: Money
    previous_month_total: Money
    month_over_month_change_percent: Optional[Money] = None
    has_baseline: bool


class CategorySlice(BaseModel):
    name: Category
    value: Money
    percentage: str
    color: str


class TrendPoint(BaseModel):
    date: dt.date
    label: str
    amount: Money


class InsightRequest(BaseModel):
    message: str
    agent_id: str


class InsightQuestion(BaseModel):
    question: str
    category: Union[Literal["all"], Category] = "all"
    date_range: DateRange = DateRange.ALL
    search: str = ""


class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "agent"]
    content: str
    timestamp: dt.datetime
