import logging
from decimal import Decimal
from typing import Optional, Tuple

from motorent.models import Part, CategoryConfig
from motorent.utils.decimals import to_decimal
from .config import PricingConfig
from .models import AlertLevel, GuardrailOutcome

logger = logging.getLogger(__name__)


def margin_targets(part: Part, category_config: Optional[CategoryConfig],
                   config: PricingConfig) -> Tuple[Decimal, Decimal]:
    """(margen mínimo, margen objetivo): repuesto -> categoría -> default."""
    floor = part.margin_floor
    if floor is None and category_config is not None:
        floor = category_config.margin_floor
    target = part.margin_target
    if target is None and category_config is not None:
        target = category_config.margin_target
    return (
        to_decimal(floor, config.default_margin_floor),
        to_decimal(target, config.default_margin_target),
    )


def compute_margin(price: Decimal, cost: Decimal) -> Optional[Decimal]:
    """Margen sobre precio de venta; None si hay costo pero el precio no es positivo."""
    if cost <= 0:
        return Decimal(1)
    if price <= 0:
        return None
    return (price - cost) / price


class MarginGuardrail:
    """Piso de margen no negociable: gana siempre sobre cualquier descuento."""

    def enforce(self, price: Decimal, cost: Decimal, margin_floor: Decimal,
                margin_target: Decimal) -> GuardrailOutcome:
        margin = compute_margin(price, cost)

        if cost > 0 and (margin is None or margin < margin_floor):
            forced = cost / (1 - margin_floor)
            logger.info("Guardrail: precio %s bajo margen mínimo %s, se fuerza a %s", price, margin_floor, forced)
            return GuardrailOutcome(price=forced, margin=margin_floor, alert_level=AlertLevel.CRITICAL)

        if margin < margin_target:
            return GuardrailOutcome(price=price, margin=margin, alert_level=AlertLevel.LOW)

        return GuardrailOutcome(price=price, margin=margin, alert_level=AlertLevel.OK)
