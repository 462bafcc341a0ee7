import math
from decimal import Decimal, InvalidOperation, ROUND_HALF_DOWN, ROUND_HALF_UP, localcontext


def parse_amount(value) -> float | None:
    """Return ``value`` as a float, or None when it is not a usable number.

    Accepts ints, floats, Decimals and numeric strings ("1,250.50", "$40",
    "(40.00)" for a negative). Booleans, blanks, NaN and infinities are rejected.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float, Decimal)):
        try:
            amount = float(value)
        except ValueError:
            # signaling NaN
            return None
    elif isinstance(value, str):
        normalized = value.strip()
        if not normalized:
            return None

        is_negative = normalized.startswith("(") and normalized.endswith(")")
        normalized = normalized.replace("$", "").replace(",", "")

        if is_negative:
            normalized = normalized[1:-1]

        try:
            amount = float(Decimal(normalized))
        except (InvalidOperation, ValueError):
            return None

        if is_negative:
            amount = -amount
    else:
        return None

    if math.isnan(amount) or math.isinf(amount):
        return None
    return amount


def round_amount(value: float, places: int = 2) -> float:
    """Round to ``places`` decimals; halves go toward positive infinity.

    ``-2.5`` rounds to ``-2`` and ``2.5`` to ``3``.
    """
    amount = Decimal(value)
    rounding = ROUND_HALF_DOWN if amount.is_signed() else ROUND_HALF_UP
    with localcontext() as ctx:
        # enough digits for the integer part plus the requested decimals
        ctx.prec = max(ctx.prec, amount.adjusted() + places + 2)
        return float(amount.quantize(Decimal(1).scaleb(-places), rounding=rounding))


def round_whole(value: float) -> int:
    return int(round_amount(value, 0))
