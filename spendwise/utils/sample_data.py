"""
Canned expenses used to seed a fresh store so the dashboard is not empty.
"""
import random
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional

from spendwise.models.expense import Category, ExpenseCreate
from spendwise.utils.filters import Instant, as_local_date

SAMPLE_EXPENSES = [
    ("45", Category.FOOD, "Dinner with friends"),
    ("12.5", Category.FOOD, "Coffee and breakfast"),
    ("85", Category.TRANSPORT, "Gas"),
    ("120", Category.SHOPPING, "Winter jacket"),
    ("65", Category.BILLS, "Internet subscription"),
    ("45", Category.ENTERTAINMENT, "Movie tickets"),
    ("35", Category.HEALTH, "Gym membership"),
    ("28", Category.FOOD, "Groceries"),
    ("15", Category.TRANSPORT, "Ride share"),
    ("55", Category.SHOPPING, "Electronics"),
    ("30", Category.BILLS, "Phone bill"),
    ("25", Category.ENTERTAINMENT, "Streaming subscription"),
    ("40", Category.HEALTH, "Doctor visit"),
    ("50", Category.FOOD, "Restaurant lunch"),
    ("22", Category.TRANSPORT, "Public transit pass"),
    ("95", Category.SHOPPING, "Shoes"),
    ("18", Category.FOOD, "Delivery dinner"),
    ("60", Category.BILLS, "Electricity"),
    ("35", Category.ENTERTAINMENT, "Concert tickets"),
    ("48", Category.HEALTH, "Pharmacy"),
]


def generate_sample_expenses(
    now: Instant,
    rng: Optional[random.Random] = None,
    max_days_ago: int = 30,
) -> List[ExpenseCreate]:
    """Each sample expense dated a random 0..max_days_ago-1 days before now, oldest first."""
    rng = rng or random.Random()
    today = as_local_date(now)
    samples = [
        ExpenseCreate(
            amount=Decimal(amount),
            category=category,
            date=today - timedelta(days=rng.randrange(max_days_ago)),
            notes=notes,
        )
        for amount, category, notes in SAMPLE_EXPENSES
    ]
    # seeded in this order, so the newest ends up first in the store
    samples.sort(key=lambda exp: exp.date)
    return samples
