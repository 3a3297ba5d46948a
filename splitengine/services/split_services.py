import logging
from typing import Dict, List, Mapping
from splitengine.core.errors import InvalidAmount, InvalidWeight, NoShares, DuplicateSplit
from splitengine.schemas.balance import OwedAmount
from splitengine.schemas.expense import Expense
from splitengine.schemas.member import MemberId, id_sort_key

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def calculate_owed_amounts(amount: int, weights: Mapping[MemberId, int]) -> Dict[MemberId, int]:
    """Split ``amount`` minor units across members in proportion to ``weights``.

    Every member gets ``amount * weight // total_weight``. The units lost to
    flooring are handed out one at a time, largest remainder first, ties by
    member id, so the result always sums to ``amount``. Zero-weight members
    are left out of the result.
    """
    if not _is_int(amount) or amount <= 0:
        logger.warning("Rejected split amount %r", amount)
        raise InvalidAmount(f"Amount must be a positive number of minor units, got {amount!r}")

    for member_id, weight in weights.items():
        if not _is_int(weight) or weight < 0:
            logger.warning("Rejected weight %r for member %r", weight, member_id)
            raise InvalidWeight(f"Weight for member {member_id!r} must be a non-negative integer, got {weight!r}")

    total_weight = sum(weights.values())
    if total_weight == 0:
        raise NoShares("At least one member must have shares > 0")

    owed = {}
    remainders = []
    for member_id in sorted(weights, key=id_sort_key):
        weight = weights[member_id]
        if weight == 0:
            continue
        share, rem = divmod(amount * weight, total_weight)
        owed[member_id] = share
        remainders.append((-rem, id_sort_key(member_id), member_id))

    leftover = amount - sum(owed.values())
    # leftover < number of participants, each gets at most one unit
    for _, _, member_id in sorted(remainders)[:leftover]:
        owed[member_id] += 1

    logger.debug("Split %s over %s -> %s", amount, dict(weights), owed)
    return owed


def get_weight_map(expense: Expense) -> Dict[MemberId, int]:
    weights = {}
    for s in expense.splits:
        if s.member_id in weights:
            raise DuplicateSplit(f"Member {s.member_id!r} appears twice in the splits of expense {expense.id!r}")
        weights[s.member_id] = s.weight
    return weights


def calculate_expense_split(expense: Expense) -> Dict[MemberId, int]:
    return calculate_owed_amounts(expense.amount, get_weight_map(expense))


def get_owed_amounts(expense: Expense) -> List[OwedAmount]:
    return [
        OwedAmount(member_id=member_id, amount=amount)
        for member_id, amount in calculate_expense_split(expense).items()
    ]
