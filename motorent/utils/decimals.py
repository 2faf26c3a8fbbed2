from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

FOUR_PLACES = Decimal("0.0001")
TWO_PLACES = Decimal("0.01")


def to_decimal(val, default: Decimal = Decimal(0)) -> Decimal:
    """Convierte valores de la DB / JSON a Decimal; None o basura -> default."""
    if val is None:
        return default
    if isinstance(val, Decimal):
        return val
    try:
        return Decimal(str(val))
    except (InvalidOperation, ValueError):
        return default


def quantize(val: Decimal, places: Decimal = TWO_PLACES) -> Decimal:
    return val.quantize(places, rounding=ROUND_HALF_UP)
