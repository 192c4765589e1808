from decimal import Decimal, ROUND_HALF_UP

TWO_PLACES = Decimal("0.01")


def to_money(value) -> Decimal:
    """Coerce a number (or None) to a Decimal rounded to two places."""
    if value is None:
        return Decimal("0.00")
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def line_amount(quantity, rate) -> Decimal:
    """quantity x rate, rounded to two places. Missing values count as zero."""
    qty = Decimal(str(quantity)) if quantity is not None else Decimal(0)
    per_unit = Decimal(str(rate)) if rate is not None else Decimal(0)
    return to_money(qty * per_unit)


__all__ = ['to_money', 'line_amount']
