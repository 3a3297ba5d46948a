from pydantic import BaseModel

MemberId = int | str


def id_sort_key(value):
    # ints before strs, so a group mixing both still has one order
    return (type(value).__name__, value)


class Member(BaseModel):
    id: MemberId
    name: str
    email: str | None = None

    class Config:
        from_attributes = True
        frozen = True
