import logging
from typing import Dict, Iterable, List, Mapping, Sequence
from splitengine.core.config import settings
from splitengine.core.errors import UnknownMember, UnbalancedInput
from splitengine.schemas.balance import MemberBalance
from splitengine.schemas.expense import Expense
from splitengine.schemas.member import Member, MemberId, id_sort_key
from splitengine.services.split_services import calculate_expense_split

logger = logging.getLogger(__name__)


def get_member_ids(members: Iterable[Member | MemberId]) -> set:
    return {m.id if isinstance(m, Member) else m for m in members}


def check_members(member_ids: set, expense: Expense):
    if expense.paid_by not in member_ids:
        logger.warning("Expense %r paid by unknown member %r", expense.id, expense.paid_by)
        raise UnknownMember(expense.paid_by, f"Payer {expense.paid_by!r} of expense {expense.id!r} is not part of the group")

    for s in expense.splits:
        if s.member_id not in member_ids:
            logger.warning("Expense %r split with unknown member %r", expense.id, s.member_id)
            raise UnknownMember(s.member_id, f"Member {s.member_id!r} in expense {expense.id!r} is not part of the group")


def check_zero_sum(net: Mapping[MemberId, int], epsilon: int | None = None):
    if epsilon is None:
        epsilon = settings.SETTLEMENT_EPSILON

    total = sum(net.values())
    if abs(total) >= max(epsilon, 1):
        logger.warning("Balances off by %s", total)
        raise UnbalancedInput(total)


def aggregate_balances(
    expenses: Sequence[Expense],
    owed: Sequence[Mapping[MemberId, int]],
) -> Dict[MemberId, int]:
    net: Dict[MemberId, int] = {}

    for expense, owed_amounts in zip(expenses, owed, strict=True):
        # Payer gets credit for the full amount
        net[expense.paid_by] = net.get(expense.paid_by, 0) + expense.amount

        # Zero-weight participants stay in the map at 0
        for s in expense.splits:
            net.setdefault(s.member_id, 0)

        # Each member in the split owes their share
        for uid, amt in owed_amounts.items():
            net[uid] = net.get(uid, 0) - amt

    return net


def merge_balance_maps(*maps: Mapping[MemberId, int]) -> Dict[MemberId, int]:
    net: Dict[MemberId, int] = {}
    for m in maps:
        for uid, amt in m.items():
            net[uid] = net.get(uid, 0) + amt
    return {uid: net[uid] for uid in sorted(net, key=id_sort_key)}


def split_expenses(
    members: Iterable[Member | MemberId],
    expenses: Sequence[Expense],
) -> List[Dict[MemberId, int]]:
    member_ids = get_member_ids(members)

    # Validate everything first, no partial maps
    owed = []
    for expense in expenses:
        check_members(member_ids, expense)
        owed.append(calculate_expense_split(expense))
    return owed


def get_net_balance_map(
    members: Iterable[Member | MemberId],
    expenses: Sequence[Expense],
) -> Dict[MemberId, int]:
    owed = split_expenses(members, expenses)
    net = merge_balance_maps(aggregate_balances(expenses, owed))
    check_zero_sum(net)

    logger.debug("Net balances over %d expenses: %s", len(expenses), net)
    return net


def get_overall_balances(members, expenses) -> Dict[MemberId, int]:
    net = get_net_balance_map(members, expenses)

    return {
        uid: amount
        for uid, amount in net.items()
        if amount != 0
    }


def get_member_balance(members, expenses, member_id: MemberId) -> MemberBalance:
    if member_id not in get_member_ids(members):
        raise UnknownMember(member_id)

    net = get_net_balance_map(members, expenses)
    return MemberBalance(
        member_id=member_id,
        net_balance=net.get(member_id, 0)
    )
