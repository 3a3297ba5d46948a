from datetime import datetime
from typing import Dict, List
from pydantic import BaseModel, PositiveInt
from splitengine.schemas.member import MemberId


class OwedAmount(BaseModel):
    member_id: MemberId
    amount: int

    class Config:
        frozen = True


class Settlement(BaseModel):
    from_id: MemberId
    to_id: MemberId
    amount: PositiveInt

    class Config:
        frozen = True


class SettlementOut(Settlement):
    from_name: str | None = None
    to_name: str | None = None


class MemberBalance(BaseModel):
    member_id: MemberId
    net_balance: int


class SplitDetail(BaseModel):
    member_id: MemberId
    name: str | None = None
    shares: int
    amount: int
    is_payer: bool = False


class ExpenseBreakdown(BaseModel):
    expense_id: int | str
    name: str | None = None
    amount: int
    paid_by: MemberId
    total_shares: int
    splits: List[SplitDetail]


class DebtItem(BaseModel):
    expense_id: int | str
    name: str | None = None
    paid_by: MemberId
    payer_name: str | None = None
    amount_i_owe: int
    created_at: datetime | None = None


class MemberDebts(BaseModel):
    member_id: MemberId
    total_debt: int
    expenses: List[DebtItem]


class CreditItem(BaseModel):
    expense_id: int | str
    name: str | None = None
    owed_by: MemberId
    debtor_name: str | None = None
    amount_owed: int
    created_at: datetime | None = None


class MemberCredits(BaseModel):
    member_id: MemberId
    total_credit: int
    credits: List[CreditItem]


class GroupSummary(BaseModel):
    net: Dict[MemberId, int]
    settlements: List[SettlementOut]
    expenses: List[ExpenseBreakdown]
