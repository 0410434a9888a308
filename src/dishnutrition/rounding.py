"""Half-up rounding for reported nutrition numbers."""

from decimal import ROUND_HALF_UP, Decimal, localcontext


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero instead of Python's round-half-to-even.

    Examples:
        round_half_up(2.5) -> 3.0
        round_half_up(0.25, 1) -> 0.3
    """
    if value != value or value in (float("inf"), float("-inf")):
        return value
    exact = Decimal(str(value))
    with localcontext() as ctx:
        # Enough digits for every integer place plus the kept decimals
        ctx.prec = max(ctx.prec, exact.adjusted() + ndigits + 2)
        return float(exact.quantize(Decimal(1).scaleb(-ndigits), rounding=ROUND_HALF_UP))
