import heapq
import logging
from typing import Dict, List, Mapping, Sequence
from splitengine.core.config import settings
from splitengine.schemas.balance import Settlement
from splitengine.schemas.member import MemberId, id_sort_key
from splitengine.services.balance_services import check_zero_sum

logger = logging.getLogger(__name__)


def simplify_debts(net_map: Mapping[MemberId, int], epsilon: int | None = None) -> List[Settlement]:
    """Resolve net balances into as few payments as the greedy matcher allows.

    The largest creditor and the largest debtor are paired each round and the
    smaller of the two amounts changes hands. Whoever still has money left
    goes back into the pool, so ``n`` unbalanced members never need more than
    ``n - 1`` payments. Equal amounts are taken in ascending member id order.

    Balances closer to zero than ``epsilon`` minor units are treated as
    settled. With an epsilon above one unit, several debts each under
    epsilon are all dropped even when together they cover a creditor that
    is above it, so that creditor gets nothing. Raises ``UnbalancedInput``
    when the map does not sum to zero.
    """
    if epsilon is None:
        epsilon = settings.SETTLEMENT_EPSILON
    epsilon = max(epsilon, 1)

    check_zero_sum(net_map, epsilon)

    # (-remaining, id key, uid) so the heap pops the largest amount, then the smallest id
    creditors = []
    debtors = []

    for uid, bal in net_map.items():
        if bal >= epsilon:
            creditors.append((-bal, id_sort_key(uid), uid))
        elif bal <= -epsilon:
            debtors.append((bal, id_sort_key(uid), uid))

    heapq.heapify(creditors)
    heapq.heapify(debtors)

    transfers: List[Settlement] = []

    while creditors and debtors:
        cred_amt, _, cred_id = heapq.heappop(creditors)
        debt_amt, _, debt_id = heapq.heappop(debtors)
        cred_amt, debt_amt = -cred_amt, -debt_amt

        pay_amt = min(cred_amt, debt_amt)
        transfers.append(Settlement(from_id=debt_id, to_id=cred_id, amount=pay_amt))

        new_cred = cred_amt - pay_amt
        new_debt = debt_amt - pay_amt

        if new_cred >= epsilon:
            heapq.heappush(creditors, (-new_cred, id_sort_key(cred_id), cred_id))
        if new_debt >= epsilon:
            heapq.heappush(debtors, (-new_debt, id_sort_key(debt_id), debt_id))

    logger.debug("Resolved %d balances into %d settlements", len(net_map), len(transfers))
    return transfers


def apply_settlements(net_map: Mapping[MemberId, int], settlements: Sequence[Settlement]) -> Dict[MemberId, int]:
    """Replay payments against ``net_map``: the payer moves up, the payee down."""
    net = dict(net_map)

    for s in settlements:
        net[s.from_id] = net.get(s.from_id, 0) + s.amount
        net[s.to_id] = net.get(s.to_id, 0) - s.amount

    return net
