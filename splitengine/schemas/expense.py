from datetime import datetime
from typing import List
from pydantic import BaseModel, StrictInt
from splitengine.schemas.member import MemberId


class SplitInput(BaseModel):
    member_id: MemberId
    weight: StrictInt = 1

    class Config:
        from_attributes = True
        frozen = True


class Expense(BaseModel):
    id: int | str
    amount: StrictInt
    paid_by: MemberId
    name: str | None = None
    description: str | None = None
    category: str = "General"
    created_at: datetime | None = None
    splits: List[SplitInput]

    class Config:
        from_attributes = True
        frozen = True
