import logging
from typing import Dict, Iterable, List, Sequence
from splitengine.core.errors import UnknownMember
from splitengine.schemas.balance import (
    CreditItem,
    DebtItem,
    ExpenseBreakdown,
    GroupSummary,
    MemberCredits,
    MemberDebts,
    SettlementOut,
    SplitDetail,
)
from splitengine.schemas.expense import Expense
from splitengine.schemas.member import Member, MemberId, id_sort_key
from splitengine.services.balance_services import (
    aggregate_balances,
    check_members,
    check_zero_sum,
    get_member_ids,
    merge_balance_maps,
    split_expenses,
)
from splitengine.services.settlement_services import simplify_debts
from splitengine.services.split_services import calculate_expense_split, get_weight_map

logger = logging.getLogger(__name__)


def get_name_map(members: Iterable[Member]) -> Dict[MemberId, str]:
    return {m.id: m.name for m in members}


def _newest_first(expenses: Sequence[Expense], owed: List[Dict[MemberId, int]]):
    # Expenses without a timestamp sort last
    def key(pair):
        e = pair[0]
        return (e.created_at is not None, e.created_at.timestamp() if e.created_at else 0, id_sort_key(e.id))

    return sorted(zip(expenses, owed), key=key, reverse=True)


def _breakdown(expense: Expense, owed: Dict[MemberId, int], names: Dict[MemberId, str]) -> ExpenseBreakdown:
    weights = get_weight_map(expense)

    return ExpenseBreakdown(
        expense_id=expense.id,
        name=expense.name,
        amount=expense.amount,
        paid_by=expense.paid_by,
        total_shares=sum(weights.values()),
        splits=[
            SplitDetail(
                member_id=uid,
                name=names.get(uid),
                shares=weights[uid],
                amount=amount,
                is_payer=uid == expense.paid_by,
            )
            for uid, amount in owed.items()
        ],
    )


def _name_settlements(settlements, names: Dict[MemberId, str]) -> List[SettlementOut]:
    return [
        SettlementOut(
            from_id=s.from_id,
            from_name=names.get(s.from_id),
            to_id=s.to_id,
            to_name=names.get(s.to_id),
            amount=s.amount,
        )
        for s in settlements
    ]


def compute_group_summary(members: Sequence[Member], expenses: Sequence[Expense]) -> GroupSummary:
    """Run split, aggregate and settle once over the group's current records."""
    names = get_name_map(members)

    # 1. Split every expense
    owed = split_expenses(members, expenses)

    # 2. Fold into net balances
    net = merge_balance_maps(aggregate_balances(expenses, owed))
    check_zero_sum(net)

    # 3. Settle up
    settlements = simplify_debts(net)

    logger.debug(
        "Group summary: %d members, %d expenses, %d settlements",
        len(names), len(expenses), len(settlements),
    )

    return GroupSummary(
        net=net,
        settlements=_name_settlements(settlements, names),
        expenses=[_breakdown(e, o, names) for e, o in zip(expenses, owed)],
    )


def get_simplified_balances(members: Sequence[Member], expenses: Sequence[Expense]):
    summary = compute_group_summary(members, expenses)

    if not summary.settlements:
        return {
            "net": {},
            "settlements": []
        }

    return {
        "net": {
            uid: amt
            for uid, amt in summary.net.items()
            if amt != 0
        },
        "settlements": summary.settlements
    }


def get_expense_breakdown(members: Sequence[Member], expense: Expense) -> ExpenseBreakdown:
    check_members(get_member_ids(members), expense)
    return _breakdown(expense, calculate_expense_split(expense), get_name_map(members))


def get_member_debts(members: Sequence[Member], expenses: Sequence[Expense], member_id: MemberId) -> MemberDebts:
    names = get_name_map(members)
    if member_id not in names:
        raise UnknownMember(member_id)

    owed = split_expenses(members, expenses)

    total = 0
    items = []

    for expense, owed_amounts in _newest_first(expenses, owed):
        if expense.paid_by == member_id:
            continue

        amt = owed_amounts.get(member_id, 0)
        if amt <= 0:
            continue

        total += amt
        items.append(DebtItem(
            expense_id=expense.id,
            name=expense.name,
            paid_by=expense.paid_by,
            payer_name=names.get(expense.paid_by),
            amount_i_owe=amt,
            created_at=expense.created_at,
        ))

    return MemberDebts(member_id=member_id, total_debt=total, expenses=items)


def get_member_credits(members: Sequence[Member], expenses: Sequence[Expense], member_id: MemberId) -> MemberCredits:
    names = get_name_map(members)
    if member_id not in names:
        raise UnknownMember(member_id)

    owed = split_expenses(members, expenses)

    total = 0
    items = []

    for expense, owed_amounts in _newest_first(expenses, owed):
        if expense.paid_by != member_id:
            continue

        for uid, amt in owed_amounts.items():
            if uid == member_id:
                continue

            total += amt
            items.append(CreditItem(
                expense_id=expense.id,
                name=expense.name,
                owed_by=uid,
                debtor_name=names.get(uid),
                amount_owed=amt,
                created_at=expense.created_at,
            ))

    return MemberCredits(member_id=member_id, total_credit=total, credits=items)
