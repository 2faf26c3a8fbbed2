import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from motorent.crud import pricing as store
from motorent.models import Part, MarkupRule, CategoryConfig
from motorent.utils.decimals import to_decimal
from .config import PricingConfig
from .models import MarkupPrice, ResolutionMethod
from .rounding import round_price

logger = logging.getLogger(__name__)


def cost_basis(part: Part) -> Decimal:
    """Costo promedio puesto en depósito; si no hay, último precio de compra."""
    landed = to_decimal(part.avg_landed_cost)
    if landed > 0:
        return landed
    purchase = to_decimal(part.purchase_price)
    if purchase > 0:
        return purchase
    return Decimal(0)


def markup_rule_key(rule: MarkupRule):
    """Específicas de categoría primero, luego mayor prioridad, luego la más antigua."""
    return (0 if rule.category else 1, -(rule.priority or 0), rule.id or 0)


def rule_matches_part(rule: MarkupRule, part: Part, cost: Decimal) -> bool:
    if rule.category and rule.category != part.category:
        return False
    if rule.band_from is not None and cost < to_decimal(rule.band_from):
        return False
    if rule.band_to is not None and cost >= to_decimal(rule.band_to):
        return False
    if rule.is_oem is not None and bool(rule.is_oem) != bool(part.is_oem):
        return False
    return True


def pick_markup_rule(rules, part: Part, cost: Decimal) -> Optional[MarkupRule]:
    candidates = [r for r in rules if rule_matches_part(r, part, cost)]
    if not candidates:
        return None
    return sorted(candidates, key=markup_rule_key)[0]


def markup_price(part: Part, cost: Decimal, rules, category_config: Optional[CategoryConfig],
                 default_markup: Decimal) -> MarkupPrice:
    """
    Cálculo puro: `rules` puede traer reglas de más (se vuelven a filtrar
    por categoría, banda y OEM), así sirve con candidatos de SQL o con
    todas las reglas precargadas.
    """
    if cost <= 0:
        return MarkupPrice(price=Decimal(0), source=ResolutionMethod.NO_COST, description="Sin costo")

    rule = pick_markup_rule(rules, part, cost)
    if rule:
        multiplier = to_decimal(rule.multiplier)
        return MarkupPrice(
            price=round_price(cost * multiplier, rule.rounding),
            source=ResolutionMethod.MARKUP_RULE,
            description=f"{rule.name} ({multiplier.normalize():f}x)",
            rule=rule,
        )

    # Fallback: markup por defecto de la categoría (sin redondeo)
    if category_config and category_config.markup_default is not None:
        multiplier = to_decimal(category_config.markup_default)
    else:
        multiplier = default_markup
    return MarkupPrice(
        price=cost * multiplier,
        source=ResolutionMethod.CATEGORY_DEFAULT,
        description=f"Markup categoría ({multiplier.normalize():f}x)",
    )


class MarkupCalculator:
    """Precio costo-plus para repuestos sin precio explícito en la lista."""

    def __init__(self, db: Session, config: PricingConfig):
        self.db = db
        self.config = config

    def compute(self, part: Part, cost: Decimal) -> MarkupPrice:
        if cost <= 0:
            logger.warning("Repuesto %s sin costo cargado, precio markup = 0", part.id)
            return markup_price(part, cost, [], None, self.config.default_markup)

        rules = store.get_markup_candidates(self.db, part.category, cost)
        category_config = None
        if pick_markup_rule(rules, part, cost) is None:
            category_config = store.get_category_config(self.db, part.category)

        result = markup_price(part, cost, rules, category_config, self.config.default_markup)
        logger.debug("Markup repuesto %s: costo %s -> %s (%s)", part.id, cost, result.price, result.description)
        return result
