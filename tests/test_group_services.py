from datetime import datetime, timezone

import pytest

from splitengine.core.errors import UnknownMember
from splitengine.schemas.balance import SettlementOut
from splitengine.schemas.member import Member
from splitengine.services.group_services import (
    compute_group_summary,
    get_expense_breakdown,
    get_member_credits,
    get_member_debts,
    get_simplified_balances,
)


def test_group_summary(members, dinner):
    summary = compute_group_summary(members, [dinner])

    assert summary.net == {"A": 2000, "B": -1000, "C": -1000}
    assert summary.settlements == [
        SettlementOut(from_id="B", from_name="Bob", to_id="A", to_name="Alice", amount=1000),
        SettlementOut(from_id="C", from_name="Carol", to_id="A", to_name="Alice", amount=1000),
    ]
    assert len(summary.expenses) == 1
    assert summary.expenses[0].total_shares == 3


def test_group_summary_is_idempotent(members, trip_expenses, dinner):
    expenses = trip_expenses + [dinner.model_copy(update={"id": 3})]

    assert compute_group_summary(members, expenses) == compute_group_summary(members, expenses)


def test_group_summary_unknown_member_returns_nothing(members, expense_factory):
    expenses = [expense_factory(1, 1000, "A", {"A": 1, "Q": 1})]

    with pytest.raises(UnknownMember):
        compute_group_summary(members, expenses)


def test_simplified_balances(members, trip_expenses):
    result = get_simplified_balances(members, trip_expenses)

    assert result["net"] == {"A": 500, "B": -500}
    assert [(s.from_name, s.to_name, s.amount) for s in result["settlements"]] == [("Bob", "Alice", 500)]


def test_simplified_balances_when_settled(members, expense_factory):
    expenses = [
        expense_factory(1, 1000, "A", {"A": 1, "B": 1}),
        expense_factory(2, 1000, "B", {"A": 1, "B": 1}),
    ]
    assert get_simplified_balances(members, expenses) == {"net": {}, "settlements": []}


def test_expense_breakdown(members, expense_factory):
    expense = expense_factory(5, 100, "B", {"A": 1, "B": 2, "C": 0}, name="Coffee")
    breakdown = get_expense_breakdown(members, expense)

    assert breakdown.expense_id == 5
    assert breakdown.name == "Coffee"
    assert breakdown.total_shares == 3
    assert [(s.member_id, s.name, s.shares, s.amount, s.is_payer) for s in breakdown.splits] == [
        ("A", "Alice", 1, 33, False),
        ("B", "Bob", 2, 67, True),
    ]


def test_member_debts_newest_first(members, expense_factory):
    expenses = [
        expense_factory(1, 3000, "A", {"A": 1, "B": 1, "C": 1}, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
        expense_factory(2, 1000, "C", {"B": 1, "C": 1}, created_at=datetime(2024, 2, 1, tzinfo=timezone.utc)),
        expense_factory(3, 800, "B", {"A": 1, "B": 1}, created_at=datetime(2024, 3, 1, tzinfo=timezone.utc)),
        expense_factory(4, 600, "A", {"A": 1}, created_at=datetime(2024, 4, 1, tzinfo=timezone.utc)),
    ]
    debts = get_member_debts(members, expenses, "B")

    assert debts.total_debt == 1500
    assert [(d.expense_id, d.paid_by, d.payer_name, d.amount_i_owe) for d in debts.expenses] == [
        (2, "C", "Carol", 500),
        (1, "A", "Alice", 1000),
    ]


def test_member_credits(members, expense_factory):
    expenses = [
        expense_factory(1, 3000, "A", {"A": 1, "B": 1, "C": 1}),
        expense_factory(2, 1000, "C", {"A": 1, "C": 1}),
        expense_factory(3, 900, "A", {"B": 2, "C": 1}),
    ]
    credits = get_member_credits(members, expenses, "A")

    assert credits.total_credit == 2900
    assert [(c.expense_id, c.owed_by, c.debtor_name, c.amount_owed) for c in credits.credits] == [
        (3, "B", "Bob", 600),
        (3, "C", "Carol", 300),
        (1, "B", "Bob", 1000),
        (1, "C", "Carol", 1000),
    ]


def test_member_listings_reject_unknown_member(members, trip_expenses):
    with pytest.raises(UnknownMember):
        get_member_debts(members, trip_expenses, "Z")
    with pytest.raises(UnknownMember):
        get_member_credits(members, trip_expenses, "Z")


def test_member_debts_with_mixed_expense_ids(expense_factory):
    members = [Member(id=1, name="Ann"), Member(id="bob", name="Bob")]
    expenses = [
        expense_factory("x1", 400, 1, {1: 1, "bob": 1}),
        expense_factory(7, 200, 1, {"bob": 1}),
    ]
    debts = get_member_debts(members, expenses, "bob")

    assert debts.total_debt == 400
    assert [d.expense_id for d in debts.expenses] == ["x1", 7]
