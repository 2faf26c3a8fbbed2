"""
Reglas de descuento: evaluación de condiciones y aplicación sobre el precio.

Cada regla de la DB se traduce a una condición tipada que lleva solo los
parámetros que necesita; `DiscountEvaluator.matches` es el único punto
que las evalúa.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import List, Optional, Tuple, Union

from sqlalchemy.orm import Session

from motorent.crud import pricing as store
from motorent.models import Part, DiscountRule, ConditionType, DiscountType, PlanTier
from motorent.utils.dates import utcnow
from motorent.utils.decimals import to_decimal
from .config import PricingConfig
from .models import ApplicableDiscount, AppliedDiscount

logger = logging.getLogger(__name__)


# --- Condiciones ---

@dataclass(frozen=True)
class Always:
    pass

@dataclass(frozen=True)
class MinQuantity:
    min_quantity: Optional[int]

@dataclass(frozen=True)
class InCategory:
    category: Optional[str]

@dataclass(frozen=True)
class RentalPlan:
    plan: Optional[PlanTier]

@dataclass(frozen=True)
class CustomerTenure:
    months: Optional[int]

@dataclass(frozen=True)
class InCustomerGroup:
    pass


Condition = Union[Always, MinQuantity, InCategory, RentalPlan, CustomerTenure, InCustomerGroup]


def condition_from_rule(rule: DiscountRule) -> Condition:
    condition_type = ConditionType(rule.condition_type)
    if condition_type == ConditionType.ALWAYS:
        return Always()
    if condition_type == ConditionType.QUANTITY:
        return MinQuantity(rule.min_quantity)
    if condition_type == ConditionType.CATEGORY:
        return InCategory(rule.category)
    if condition_type == ConditionType.RENTAL_PLAN:
        return RentalPlan(PlanTier(rule.rental_plan) if rule.rental_plan else None)
    if condition_type == ConditionType.CUSTOMER_TENURE:
        return CustomerTenure(rule.tenure_months)
    if condition_type == ConditionType.CUSTOMER_GROUP:
        return InCustomerGroup()
    raise ValueError(f"Tipo de condición desconocido: {rule.condition_type}")


def infer_plan_tier(period_amount, config: PricingConfig) -> PlanTier:
    """
    Plan del rider inferido por el monto por período del contrato.
    Heurística provisoria hasta que el contrato tenga un campo de plan propio.
    """
    amount = to_decimal(period_amount)
    if amount >= config.plan_vip_threshold:
        return PlanTier.VIP
    if amount >= config.plan_premium_threshold:
        return PlanTier.PREMIUM
    return PlanTier.BASIC


def tenure_in_months(start: datetime, now: datetime, days_per_month: int = 30) -> float:
    return (now - start) / timedelta(days=days_per_month)


def discount_rule_key(rule: DiscountRule):
    """Mayor prioridad primero; a igual prioridad, la regla más antigua."""
    return (-(rule.priority or 0), rule.id or 0)


class DiscountEvaluator:
    """Devuelve las reglas de descuento cuya condición se cumple. No aplica precios."""

    def __init__(self, db: Session, config: PricingConfig):
        self.db = db
        self.config = config

    def evaluate(
        self,
        part: Part,
        customer_id: Optional[int] = None,
        quantity: int = 1,
        now: Optional[datetime] = None,
    ) -> List[ApplicableDiscount]:
        now = now or utcnow()
        rules = sorted(store.get_active_discount_rules(self.db, now), key=discount_rule_key)

        applicable = []
        for rule in rules:
            if self.matches(condition_from_rule(rule), part, customer_id, quantity, now):
                applicable.append(ApplicableDiscount(rule=rule, value=to_decimal(rule.value)))
                logger.debug("Descuento '%s' aplica a repuesto %s", rule.name, part.id)
        return applicable

    def matches(self, condition: Condition, part: Part, customer_id: Optional[int],
                quantity: int, now: datetime) -> bool:
        if isinstance(condition, Always):
            return True

        if isinstance(condition, MinQuantity):
            return bool(condition.min_quantity) and quantity >= condition.min_quantity

        if isinstance(condition, InCategory):
            return condition.category is not None and condition.category == part.category

        if isinstance(condition, RentalPlan):
            if not customer_id or not condition.plan:
                return False
            contract = store.get_latest_active_contract(self.db, customer_id)
            if not contract:
                return False
            return infer_plan_tier(contract.period_amount, self.config) == condition.plan

        if isinstance(condition, CustomerTenure):
            if not customer_id or not condition.months:
                return False
            first = store.get_first_contract(self.db, customer_id)
            if not first:
                return False
            return tenure_in_months(first.start_date, now, self.config.days_per_month) >= condition.months

        if isinstance(condition, InCustomerGroup):
            return bool(customer_id) and store.customer_in_any_group(self.db, customer_id)

        raise TypeError(f"Condición no soportada: {condition!r}")


# --- Aplicación ---

def apply_discount(price: Decimal, discount_type, value: Decimal) -> Decimal:
    # Un valor negativo nunca sube el precio
    value = max(value, Decimal(0))
    if DiscountType(discount_type) == DiscountType.PERCENTAGE:
        return max(Decimal(0), price * (1 - value))
    return max(Decimal(0), price - value)


def apply_discounts(price: Decimal, applicable: List[ApplicableDiscount]) -> Tuple[Decimal, List[AppliedDiscount]]:
    """
    1. El mejor descuento NO acumulable (comparando `value` crudo, sea % o monto fijo).
    2. Todos los acumulables por prioridad, cada uno sobre el precio ya descontado.
    """
    applied = []

    exclusive = [d for d in applicable if not d.accumulable]
    if exclusive:
        # max() conserva el primero ante empates, que ya viene por prioridad
        best = max(exclusive, key=lambda d: d.value)
        price = apply_discount(price, best.rule.discount_type, best.value)
        applied.append(AppliedDiscount(name=best.name, type=DiscountType(best.rule.discount_type).value,
                                       value=best.value))

    stacking = sorted((d for d in applicable if d.accumulable), key=lambda d: -d.priority)
    for discount in stacking:
        price = apply_discount(price, discount.rule.discount_type, discount.value)
        applied.append(AppliedDiscount(name=discount.name, type=DiscountType(discount.rule.discount_type).value,
                                       value=discount.value))

    return price, applied
