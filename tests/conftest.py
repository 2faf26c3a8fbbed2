import os
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

# La app crea tablas al importarse: que use una base en memoria
os.environ.setdefault("MOTORENT_DATABASE_URL", "sqlite://")

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from motorent.database import Base, get_db
from motorent.models import (
    Part, CategoryConfig, PriceList, PriceListItem, MarkupRule, DiscountRule,
    Customer, RentalContract, ContractStatus, CustomerGroup, CustomerGroupMember,
    ConditionType, DiscountType, RoundingMode,
)
from motorent.services.pricing import PricingConfig

NOW = datetime(2026, 3, 1, 12, 0, 0)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def config():
    return PricingConfig(version="test")


@pytest.fixture
def db():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    from motorent.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# --------------------------------------------------------------------------
# Factories
# --------------------------------------------------------------------------
@pytest.fixture
def make_part(db):
    def _make(name="Pastillas de freno", category="FRENOS", cost=1000, **kwargs):
        part = Part(name=name, category=category, avg_landed_cost=Decimal(str(cost)), **kwargs)
        db.add(part)
        db.commit()
        return part
    return _make


@pytest.fixture
def make_list(db):
    def _make(code="B2C", name=None, **kwargs):
        price_list = PriceList(code=code, name=name or f"Lista {code}", **kwargs)
        db.add(price_list)
        db.commit()
        return price_list
    return _make


@pytest.fixture
def make_item(db):
    def _make(price_list, part, price, min_quantity=1,
              valid_from=NOW - timedelta(days=30), valid_to=None, **kwargs):
        item = PriceListItem(
            price_list_id=price_list.id, part_id=part.id, price=Decimal(str(price)),
            min_quantity=min_quantity, valid_from=valid_from, valid_to=valid_to, **kwargs,
        )
        db.add(item)
        db.commit()
        return item
    return _make


@pytest.fixture
def make_markup_rule(db):
    def _make(name="Regla", multiplier="2.0", category=None, band_from=None, band_to=None,
              priority=0, rounding=RoundingMode.NONE, **kwargs):
        rule = MarkupRule(
            name=name, multiplier=Decimal(str(multiplier)), category=category,
            band_from=band_from, band_to=band_to, priority=priority, rounding=rounding, **kwargs,
        )
        db.add(rule)
        db.commit()
        return rule
    return _make


@pytest.fixture
def make_category_config(db):
    def _make(category="FRENOS", markup_default="2.0", margin_floor="0.15", margin_target="0.35"):
        cfg = CategoryConfig(
            category=category,
            markup_default=Decimal(markup_default),
            margin_floor=Decimal(margin_floor),
            margin_target=Decimal(margin_target),
        )
        db.add(cfg)
        db.commit()
        return cfg
    return _make


@pytest.fixture
def make_discount(db):
    def _make(name="Descuento", condition_type=ConditionType.ALWAYS, value="0.10",
              discount_type=DiscountType.PERCENTAGE, accumulable=False, priority=0, **kwargs):
        rule = DiscountRule(
            name=name, condition_type=condition_type, value=Decimal(str(value)),
            discount_type=discount_type, accumulable=accumulable, priority=priority, **kwargs,
        )
        db.add(rule)
        db.commit()
        return rule
    return _make


@pytest.fixture
def make_customer(db):
    def _make(name="Rider Test"):
        customer = Customer(name=name)
        db.add(customer)
        db.commit()
        return customer
    return _make


@pytest.fixture
def make_contract(db):
    def _make(customer, start_date, period_amount="100000", status=ContractStatus.ACTIVE):
        contract = RentalContract(
            customer_id=customer.id, start_date=start_date,
            period_amount=Decimal(period_amount), status=status,
        )
        db.add(contract)
        db.commit()
        return contract
    return _make


@pytest.fixture
def make_group(db):
    def _make(name="Riders", price_list=None, members=()):
        group = CustomerGroup(name=name, price_list_id=price_list.id if price_list else None)
        db.add(group)
        db.flush()
        for customer in members:
            db.add(CustomerGroupMember(group_id=group.id, customer_id=customer.id))
        db.commit()
        return group
    return _make
