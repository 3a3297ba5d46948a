from datetime import datetime, timezone

import pytest

from splitengine.schemas.expense import Expense, SplitInput
from splitengine.schemas.member import Member


def make_expense(id, amount, paid_by, weights, created_at=None, name=None):
    return Expense(
        id=id,
        amount=amount,
        paid_by=paid_by,
        name=name,
        created_at=created_at,
        splits=[SplitInput(member_id=uid, weight=w) for uid, w in weights.items()],
    )


@pytest.fixture
def members():
    return [
        Member(id="A", name="Alice"),
        Member(id="B", name="Bob"),
        Member(id="C", name="Carol"),
    ]


@pytest.fixture
def dinner():
    return make_expense(
        1, 3000, "A", {"A": 1, "B": 1, "C": 1},
        created_at=datetime(2024, 5, 1, 19, 30, tzinfo=timezone.utc),
        name="Dinner",
    )


@pytest.fixture
def trip_expenses():
    return [
        make_expense(
            1, 2000, "A", {"A": 1, "B": 1},
            created_at=datetime(2024, 5, 1, tzinfo=timezone.utc), name="Hotel",
        ),
        make_expense(
            2, 1000, "B", {"A": 1, "B": 1},
            created_at=datetime(2024, 5, 2, tzinfo=timezone.utc), name="Taxi",
        ),
    ]


@pytest.fixture
def expense_factory():
    return make_expense
