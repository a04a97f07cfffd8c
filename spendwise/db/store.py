import logging
import threading
from typing import Any, Dict, Iterable, List, Mapping, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from spendwise.core.exceptions import NotFoundError, ValidationError
from spendwise.models.expense import AmountPolicy, Expense, ExpenseCreate, ExpenseUpdate

logger = logging.getLogger(__name__)

ExpenseFields = Union[ExpenseCreate, ExpenseUpdate, Mapping[str, Any]]


class ExpenseStore:
    """
    In-memory owner of every expense record.

    One instance lives for the lifetime of the app; routers receive it through
    a dependency. Records are frozen models, so callers never hold anything
    they could mutate behind the store's back.
    """

    def __init__(self, amount_policy: AmountPolicy = AmountPolicy.REJECT_NEGATIVE) -> None:
        self._amount_policy = AmountPolicy(amount_policy)
        self._records: Dict[str, Expense] = {}
        self._next_seq = 0
        self._lock = threading.Lock()

    @property
    def amount_policy(self) -> AmountPolicy:
        return self._amount_policy

    def __len__(self) -> int:
        return len(self._records)

    def count(self) -> int:
        return len(self._records)

    def create(self, fields: ExpenseFields) -> Expense:
        """Validate fields, assign a fresh id and store the record."""
        data = self._validate(fields)
        with self._lock:
            expense_id = self._new_id()
            expense = Expense(id=expense_id, seq=self._next_seq, **data)
            self._next_seq += 1
            self._records[expense_id] = expense
        logger.info(f"Created expense {expense_id} ({expense.category.value} {expense.amount})")
        return expense

    def update(self, expense_id: str, fields: ExpenseFields) -> Expense:
        """Replace every field of an existing record, keeping its id and position."""
        data = self._validate(fields)
        with self._lock:
            current = self._records.get(expense_id)
            if current is None:
                raise NotFoundError(f"Expense {expense_id} not found")
            expense = Expense(id=expense_id, seq=current.seq, **data)
            self._records[expense_id] = expense
        logger.info(f"Updated expense {expense_id}")
        return expense

    def delete(self, expense_id: str) -> None:
        with self._lock:
            if expense_id not in self._records:
                raise NotFoundError(f"Expense {expense_id} not found")
            del self._records[expense_id]
        logger.info(f"Deleted expense {expense_id}")

    def get(self, expense_id: str) -> Expense:
        expense = self._records.get(expense_id)
        if expense is None:
            raise NotFoundError(f"Expense {expense_id} not found")
        return expense

    def all(self) -> List[Expense]:
        """Every record, most recently inserted first."""
        with self._lock:
            records = list(self._records.values())
        records.reverse()
        return records

    def seed(self, records: Iterable[ExpenseFields]) -> List[Expense]:
        return [self.create(fields) for fields in records]

    def _new_id(self) -> str:
        while True:
            candidate = uuid4().hex[:12]
            if candidate not in self._records:
                return candidate

    def _validate(self, fields: ExpenseFields) -> Dict[str, Any]:
        if isinstance(fields, (ExpenseCreate, ExpenseUpdate)):
            model = fields
        else:
            try:
                model = ExpenseCreate.model_validate(dict(fields))
            except PydanticValidationError as e:
                raise ValidationError(_describe(e)) from e
            except TypeError as e:
                raise ValidationError(f"Expense fields must be a mapping: {e}") from e

        if not model.amount.is_finite():
            raise ValidationError("amount must be a finite decimal")
        if model.amount < 0 and self._amount_policy is AmountPolicy.REJECT_NEGATIVE:
            raise ValidationError("amount must not be negative")
        return model.model_dump()


def _describe(error: PydanticValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(loc) for loc in item.get("loc", ())) or "expense"
        parts.append(f"{location}: {item.get('msg')}")
    return "; ".join(parts)
