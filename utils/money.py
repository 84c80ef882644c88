from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal('0.01')


def to_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(amount):
    """Round to 2 places, halves away from zero."""
    return to_decimal(amount).quantize(CENTS, rounding=ROUND_HALF_UP)
