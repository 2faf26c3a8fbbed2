"""
Vista previa de recálculo retail: qué precio sugeriría el markup para cada
repuesto frente a su precio de venta actual. Solo lectura: no crea lotes
de cambio ni toca precios.
"""
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from motorent.crud import pricing as store
from motorent.utils.decimals import to_decimal, quantize, FOUR_PLACES
from .config import PricingConfig
from .markup import markup_price, cost_basis

logger = logging.getLogger(__name__)


@dataclass
class RetailSuggestion:
    part_id: int
    part_name: str
    category: Optional[str]
    cost: Decimal
    current_price: Decimal
    suggested_price: Decimal
    current_margin: Decimal
    new_margin: Decimal
    rule_applied: str
    change_pct: Decimal


@dataclass
class RetailSuggestionSummary:
    total: int = 0
    rising: int = 0
    falling: int = 0
    unchanged: int = 0
    avg_current_margin: Decimal = Decimal(0)
    avg_new_margin: Decimal = Decimal(0)


@dataclass
class RetailSuggestionReport:
    items: List[RetailSuggestion] = field(default_factory=list)
    summary: RetailSuggestionSummary = field(default_factory=RetailSuggestionSummary)


def suggest_retail_prices(db: Session, config: PricingConfig, part_ids=None, categories=None,
                          only_without_price: bool = False) -> RetailSuggestionReport:
    parts = store.get_parts(db, part_ids, categories, only_without_price)
    rules = store.get_active_markup_rules(db)
    configs = {c.category: c for c in store.get_category_configs(db)}

    report = RetailSuggestionReport()
    sum_current = Decimal(0)
    sum_new = Decimal(0)

    for part in parts:
        cost = cost_basis(part)
        # Sin costo no hay nada que sugerir
        if cost <= 0:
            continue

        result = markup_price(part, cost, rules, configs.get(part.category or ""), config.default_markup)
        suggested = result.price
        current = to_decimal(part.sale_price)

        current_margin = (current - cost) / current if current > 0 else Decimal(0)
        new_margin = (suggested - cost) / suggested if suggested > 0 else Decimal(0)
        change = (suggested - current) / current * 100 if current > 0 else Decimal(100)

        if suggested > current:
            report.summary.rising += 1
        elif suggested < current:
            report.summary.falling += 1
        else:
            report.summary.unchanged += 1
        sum_current += current_margin
        sum_new += new_margin

        report.items.append(RetailSuggestion(
            part_id=part.id,
            part_name=part.name,
            category=part.category,
            cost=cost,
            current_price=current,
            suggested_price=suggested,
            current_margin=quantize(current_margin, FOUR_PLACES),
            new_margin=quantize(new_margin, FOUR_PLACES),
            rule_applied=result.description,
            change_pct=change.quantize(Decimal("0.1")),
        ))

    report.summary.total = len(report.items)
    if report.items:
        report.summary.avg_current_margin = quantize(sum_current / len(report.items), FOUR_PLACES)
        report.summary.avg_new_margin = quantize(sum_new / len(report.items), FOUR_PLACES)

    logger.info("Sugerencias retail: %s repuestos (%s suben, %s bajan)",
                report.summary.total, report.summary.rising, report.summary.falling)
    return report
