from datetime import timedelta
from decimal import Decimal

import pytest

from motorent.services.pricing import ListNotFound, NoDefaultList
from motorent.services.pricing.models import ResolutionMethod
from motorent.services.pricing.price_lists import PriceListResolver


def test_explicit_code_wins(db, config, make_list):
    make_list("B2C")
    taller = make_list("TALLER")

    assert PriceListResolver(db, config).select_list(list_code="TALLER").id == taller.id


def test_unknown_code_raises(db, config, make_list):
    make_list("B2C")

    with pytest.raises(ListNotFound):
        PriceListResolver(db, config).select_list(list_code="NONEXISTENT")


def test_customer_group_list(db, config, make_list, make_customer, make_group):
    make_list("B2C")
    rider = make_list("RIDER")
    customer = make_customer()
    make_group(price_list=rider, members=[customer])

    assert PriceListResolver(db, config).select_list(customer_id=customer.id).code == "RIDER"


def test_group_without_list_falls_back_to_default(db, config, make_list, make_customer, make_group):
    make_list("B2C")
    customer = make_customer()
    make_group(price_list=None, members=[customer])

    assert PriceListResolver(db, config).select_list(customer_id=customer.id).code == "B2C"


def test_multiple_groups_highest_list_priority_wins(db, config, make_list, make_customer, make_group):
    make_list("B2C")
    low = make_list("TALLER", priority=5)
    high = make_list("RIDER", priority=10)
    customer = make_customer()
    make_group(name="Talleres", price_list=low, members=[customer])
    make_group(name="Riders", price_list=high, members=[customer])

    assert PriceListResolver(db, config).select_list(customer_id=customer.id).code == "RIDER"


def test_default_list_without_customer(db, config, make_list):
    make_list("B2C")

    assert PriceListResolver(db, config).select_list().code == "B2C"


def test_missing_default_list_raises(db, config):
    with pytest.raises(NoDefaultList):
        PriceListResolver(db, config).select_list()


def test_quantity_tier_picks_highest_reached(db, config, now, make_part, make_list, make_item):
    b2c = make_list("B2C")
    part = make_part()
    make_item(b2c, part, 500, min_quantity=1)
    make_item(b2c, part, 450, min_quantity=10)
    make_item(b2c, part, 400, min_quantity=50)

    base = PriceListResolver(db, config).resolve(part, quantity=15, now=now)

    assert base.method == ResolutionMethod.LIST_ITEM
    assert base.price == Decimal("450")


def test_most_recent_validity_wins_on_same_tier(db, config, now, make_part, make_list, make_item):
    b2c = make_list("B2C")
    part = make_part()
    make_item(b2c, part, 500, valid_from=now - timedelta(days=60))
    make_item(b2c, part, 450, valid_from=now - timedelta(days=5))

    base = PriceListResolver(db, config).resolve(part, quantity=5, now=now)

    assert base.price == Decimal("450")
    assert base.method == ResolutionMethod.LIST_ITEM


def test_validity_window_excludes_expired_and_future(db, config, now, make_part, make_list, make_item,
                                                     make_category_config):
    b2c = make_list("B2C")
    part = make_part(cost=1000)
    make_category_config(category=part.category, markup_default="2.0")
    make_item(b2c, part, 300, valid_from=now - timedelta(days=60), valid_to=now - timedelta(days=1))
    make_item(b2c, part, 200, valid_from=now + timedelta(days=1))
    make_item(b2c, part, 100, valid_from=now - timedelta(days=60), valid_to=now)

    base = PriceListResolver(db, config).resolve(part, now=now)

    assert base.method == ResolutionMethod.CATEGORY_DEFAULT
    assert base.price == Decimal("2000")


def test_item_label_is_used_as_detail(db, config, now, make_part, make_list, make_item):
    b2c = make_list("B2C")
    part = make_part()
    make_item(b2c, part, 999, label="Precio negociado")

    assert PriceListResolver(db, config).resolve(part, now=now).detail == "Precio negociado"


def test_auto_calculated_list(db, config, now, make_part, make_list, make_item):
    interno = make_list("INTERNO", auto_calculate=True, markup_formula=Decimal("1.05"))
    part = make_part(cost=1000)
    make_item(interno, part, 5000)

    base = PriceListResolver(db, config).resolve(part, list_code="INTERNO", now=now)

    assert base.method == ResolutionMethod.AUTO
    assert base.price == Decimal("1050")
    assert base.detail == "Auto-calculado (costo × 1.05)"


def test_auto_calculated_list_without_cost(db, config, now, make_part, make_list):
    make_list("INTERNO", auto_calculate=True, markup_formula=Decimal("1.05"))
    part = make_part(cost=0)

    base = PriceListResolver(db, config).resolve(part, list_code="INTERNO", now=now)

    assert base.method == ResolutionMethod.NO_COST
    assert base.price == Decimal(0)


def test_markup_fallback_when_list_has_no_item(db, config, now, make_part, make_list, make_markup_rule):
    make_list("B2C")
    make_markup_rule(name="General", multiplier="2.5")
    part = make_part(cost=1000)

    base = PriceListResolver(db, config).resolve(part, now=now)

    assert base.method == ResolutionMethod.MARKUP_RULE
    assert base.price == Decimal("2500")


def test_quantity_five_reaches_five_unit_tier(db, config, now, make_part, make_list, make_item):
    b2c = make_list("B2C")
    part = make_part()
    make_item(b2c, part, 500, min_quantity=1)
    make_item(b2c, part, 450, min_quantity=5)

    base = PriceListResolver(db, config).resolve(part, quantity=5, now=now)

    assert base.price == Decimal("450")
    assert base.method == ResolutionMethod.LIST_ITEM
