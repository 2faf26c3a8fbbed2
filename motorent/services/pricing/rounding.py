from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import Optional, Union

from motorent.models import RoundingMode

_HUNDRED = Decimal(100)
_NINETY_NINE = Decimal(99)


def _nearest(price: Decimal, step: int) -> Decimal:
    step = Decimal(step)
    return (price / step).quantize(Decimal(1), rounding=ROUND_HALF_UP) * step


def round_price(price: Decimal, mode: Optional[Union[RoundingMode, str]] = None) -> Decimal:
    """Redondeo de presentación según el modo de la regla de markup."""
    if not mode:
        return price
    mode = RoundingMode(mode)

    if mode == RoundingMode.NEAREST_10:
        return _nearest(price, 10)
    if mode == RoundingMode.NEAREST_50:
        return _nearest(price, 50)
    if mode == RoundingMode.NEAREST_99:
        # Terminar en 99: 5401 -> 5499
        base = (price / _HUNDRED).quantize(Decimal(1), rounding=ROUND_FLOOR) * _HUNDRED
        return base + _NINETY_NINE
    return price


def round_to_unit(price: Decimal) -> Decimal:
    """Redondeo final a unidades enteras de moneda (siempre se aplica)."""
    return price.quantize(Decimal(1), rounding=ROUND_HALF_UP)
