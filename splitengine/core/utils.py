from decimal import Decimal, ROUND_HALF_UP, InvalidOperation, getcontext

from splitengine.core.config import settings
from splitengine.core.errors import InvalidAmount

getcontext().prec = 28


def minor_unit(exponent: int | None = None) -> Decimal:
    if exponent is None:
        exponent = settings.CURRENCY_EXPONENT
    return Decimal(1).scaleb(-exponent)


def qround(d: Decimal, exponent: int | None = None) -> Decimal:
    return d.quantize(minor_unit(exponent), rounding=ROUND_HALF_UP)


def to_minor_units(value, exponent: int | None = None) -> int:
    """Convert a display amount in major units ("12.34", Decimal, int) to an int of minor units.

    Floats are refused: they are the drift this conversion exists to avoid.
    """
    if isinstance(value, (float, bool)):
        raise InvalidAmount(f"Amount {value!r} must be given as a string, Decimal or int")

    try:
        d = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmount(f"Amount {value!r} is not a number")

    if not d.is_finite():
        raise InvalidAmount(f"Amount {value!r} is not a finite number")

    unit = minor_unit(exponent)
    try:
        return int(qround(d, exponent) / unit)
    except InvalidOperation:
        raise InvalidAmount(f"Amount {value!r} is too large")


def format_minor_units(amount: int, exponent: int | None = None) -> str:
    unit = minor_unit(exponent)
    return str(qround(Decimal(amount) * unit, exponent))
