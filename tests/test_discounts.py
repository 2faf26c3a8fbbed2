from datetime import timedelta
from decimal import Decimal

import pytest

from motorent.models import ConditionType, DiscountType, PlanTier, ContractStatus
from motorent.services.pricing import PricingConfig
from motorent.services.pricing.discounts import (
    DiscountEvaluator, apply_discount, apply_discounts, infer_plan_tier, tenure_in_months,
)
from motorent.services.pricing.models import ApplicableDiscount


def names(applicable):
    return [d.name for d in applicable]


# --- Condiciones ---

def test_always_applies(db, config, now, make_part, make_discount):
    make_discount(name="Promo")

    assert names(DiscountEvaluator(db, config).evaluate(make_part(), now=now)) == ["Promo"]


@pytest.mark.parametrize("quantity, expected", [(9, []), (10, ["10+"]), (60, ["10+"])])
def test_quantity_condition(db, config, now, make_part, make_discount, quantity, expected):
    make_discount(name="10+", condition_type=ConditionType.QUANTITY, min_quantity=10)

    result = DiscountEvaluator(db, config).evaluate(make_part(), quantity=quantity, now=now)

    assert names(result) == expected


def test_quantity_rule_without_threshold_never_applies(db, config, now, make_part, make_discount):
    make_discount(name="Roto", condition_type=ConditionType.QUANTITY, min_quantity=None)

    assert DiscountEvaluator(db, config).evaluate(make_part(), quantity=100, now=now) == []


def test_category_condition(db, config, now, make_part, make_discount):
    make_discount(name="Frenos", condition_type=ConditionType.CATEGORY, category="FRENOS")
    evaluator = DiscountEvaluator(db, config)

    assert names(evaluator.evaluate(make_part(category="FRENOS"), now=now)) == ["Frenos"]
    assert evaluator.evaluate(make_part(category="MOTOR"), now=now) == []


def test_rental_plan_from_active_contract(db, config, now, make_part, make_discount, make_customer,
                                          make_contract):
    make_discount(name="Básico", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.BASIC)
    make_discount(name="VIP", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.VIP)
    customer = make_customer()
    make_contract(customer, now - timedelta(days=10), period_amount="260000")

    result = DiscountEvaluator(db, config).evaluate(make_part(), customer_id=customer.id, now=now)

    assert names(result) == ["VIP"]


def test_rental_plan_ignores_finished_contracts(db, config, now, make_part, make_discount, make_customer,
                                               make_contract):
    make_discount(name="VIP", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.VIP)
    customer = make_customer()
    make_contract(customer, now - timedelta(days=10), period_amount="300000", status=ContractStatus.FINISHED)

    assert DiscountEvaluator(db, config).evaluate(make_part(), customer_id=customer.id, now=now) == []


def test_rental_plan_requires_customer(db, config, now, make_part, make_discount):
    make_discount(name="Básico", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.BASIC)

    assert DiscountEvaluator(db, config).evaluate(make_part(), now=now) == []


def test_tenure_from_first_contract(db, config, now, make_part, make_discount, make_customer, make_contract):
    make_discount(name="6m", condition_type=ConditionType.CUSTOMER_TENURE, tenure_months=6, accumulable=True)
    make_discount(name="12m", condition_type=ConditionType.CUSTOMER_TENURE, tenure_months=12, accumulable=True)
    customer = make_customer()
    # El primer contrato (aunque terminado) define la antigüedad
    make_contract(customer, now - timedelta(days=200), status=ContractStatus.FINISHED)
    make_contract(customer, now - timedelta(days=20))

    result = DiscountEvaluator(db, config).evaluate(make_part(), customer_id=customer.id, now=now)

    assert names(result) == ["6m"]


def test_customer_group_condition(db, config, now, make_part, make_discount, make_customer, make_group):
    make_discount(name="Grupo", condition_type=ConditionType.CUSTOMER_GROUP)
    member = make_customer("Miembro")
    outsider = make_customer("Externo")
    make_group(members=[member])
    evaluator = DiscountEvaluator(db, config)

    assert names(evaluator.evaluate(make_part(), customer_id=member.id, now=now)) == ["Grupo"]
    assert evaluator.evaluate(make_part(), customer_id=outsider.id, now=now) == []


def test_validity_window_and_active_flag(db, config, now, make_part, make_discount):
    make_discount(name="Vencida", valid_to=now - timedelta(days=1))
    make_discount(name="Futura", valid_from=now + timedelta(days=1))
    make_discount(name="Hasta hoy", valid_from=now - timedelta(days=1), valid_to=now)
    make_discount(name="Apagada", is_active=False)

    assert names(DiscountEvaluator(db, config).evaluate(make_part(), now=now)) == ["Hasta hoy"]


def test_evaluate_orders_by_priority(db, config, now, make_part, make_discount):
    make_discount(name="Baja", priority=1)
    make_discount(name="Alta", priority=9)

    assert names(DiscountEvaluator(db, config).evaluate(make_part(), now=now)) == ["Alta", "Baja"]


# --- Plan y antigüedad ---

@pytest.mark.parametrize("amount, tier", [
    ("0", PlanTier.BASIC),
    ("149999", PlanTier.BASIC),
    ("150000", PlanTier.PREMIUM),
    ("249999", PlanTier.PREMIUM),
    ("250000", PlanTier.VIP),
    (None, PlanTier.BASIC),
])
def test_infer_plan_tier(amount, tier):
    assert infer_plan_tier(Decimal(amount) if amount else None, PricingConfig()) == tier


def test_infer_plan_tier_uses_configured_thresholds():
    config = PricingConfig(plan_premium_threshold=Decimal("10"), plan_vip_threshold=Decimal("20"))
    assert infer_plan_tier(Decimal("15"), config) == PlanTier.PREMIUM


def test_tenure_in_months(now):
    assert tenure_in_months(now - timedelta(days=180), now) == 6
    assert tenure_in_months(now - timedelta(days=179), now) < 6


# --- Aplicación ---

def applicable(make_discount, **kwargs):
    rule = make_discount(**kwargs)
    return ApplicableDiscount(rule=rule, value=Decimal(str(rule.value)))


def test_apply_percentage_and_fixed():
    assert apply_discount(Decimal("1000"), DiscountType.PERCENTAGE, Decimal("0.10")) == Decimal("900")
    assert apply_discount(Decimal("1000"), DiscountType.FIXED_AMOUNT, Decimal("150")) == Decimal("850")


def test_apply_never_goes_negative_nor_up():
    assert apply_discount(Decimal("100"), DiscountType.FIXED_AMOUNT, Decimal("500")) == Decimal(0)
    assert apply_discount(Decimal("100"), DiscountType.PERCENTAGE, Decimal("1.5")) == Decimal(0)
    assert apply_discount(Decimal("100"), DiscountType.PERCENTAGE, Decimal("-0.2")) == Decimal("100")


def test_best_exclusive_then_stacking_by_priority(make_discount):
    discounts = [
        applicable(make_discount, name="Plan 5%", value="0.05", priority=10),
        applicable(make_discount, name="Plan 15%", value="0.15", priority=12),
        applicable(make_discount, name="Antigüedad", value="0.10", accumulable=True, priority=5),
        applicable(make_discount, name="Fijo", value="50", accumulable=True, priority=7,
                   discount_type=DiscountType.FIXED_AMOUNT),
    ]

    price, applied = apply_discounts(Decimal("1000"), discounts)

    # 1000 -15% = 850 -> -50 = 800 -> -10% = 720
    assert price == Decimal("720")
    assert [a.name for a in applied] == ["Plan 15%", "Fijo", "Antigüedad"]
    assert applied[1].type == "FIXED_AMOUNT"


def test_exclusive_tie_keeps_first(make_discount):
    discounts = [
        applicable(make_discount, name="Primero", value="0.10"),
        applicable(make_discount, name="Segundo", value="0.10"),
    ]

    _, applied = apply_discounts(Decimal("1000"), discounts)

    assert [a.name for a in applied] == ["Primero"]


def test_discount_chain_is_non_increasing_and_non_negative(make_discount):
    discounts = [
        applicable(make_discount, name="A", value="0.30", accumulable=True, priority=3),
        applicable(make_discount, name="B", value="400", accumulable=True, priority=2,
                   discount_type=DiscountType.FIXED_AMOUNT),
        applicable(make_discount, name="C", value="0.50", accumulable=True, priority=1),
    ]

    price = Decimal("500")
    for discount in discounts:
        next_price, _ = apply_discounts(price, [discount])
        assert Decimal(0) <= next_price <= price
        price = next_price

    final, applied = apply_discounts(Decimal("500"), discounts)
    assert final == Decimal(0)
    assert len(applied) == 3


def test_no_discounts_keeps_price():
    assert apply_discounts(Decimal("1000"), []) == (Decimal("1000"), [])
