from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload

from motorent.models import (
    Part, CategoryConfig, PriceList, PriceListItem, MarkupRule, DiscountRule,
    RentalContract, ContractStatus, CustomerGroupMember, CustomerGroup,
)

# Lecturas que consume el motor de precios. Ninguna función escribe:
# los filtros van en SQL y el orden de desempate lo decide el motor.


def get_part(db: Session, part_id: int) -> Optional[Part]:
    return db.query(Part).filter(Part.id == part_id).first()


def get_parts(db: Session, part_ids=None, categories=None, only_without_price: bool = False) -> List[Part]:
    query = db.query(Part).filter(Part.is_active == True)
    if part_ids:
        query = query.filter(Part.id.in_(part_ids))
    if categories:
        query = query.filter(Part.category.in_(categories))
    if only_without_price:
        query = query.filter(or_(Part.sale_price == None, Part.sale_price == 0))
    return query.order_by(Part.id).all()


def get_category_config(db: Session, category: Optional[str]) -> Optional[CategoryConfig]:
    return db.query(CategoryConfig).filter(CategoryConfig.category == (category or "")).first()


def get_category_configs(db: Session) -> List[CategoryConfig]:
    return db.query(CategoryConfig).all()


# --- Listas de precios ---

def get_price_list_by_code(db: Session, code: str) -> Optional[PriceList]:
    return db.query(PriceList).filter(PriceList.code == code).first()


def get_customer_group_lists(db: Session, customer_id: int) -> List[CustomerGroupMember]:
    """Membresías del cliente cuyo grupo tiene una lista de precios vinculada."""
    return (
        db.query(CustomerGroupMember)
        .options(joinedload(CustomerGroupMember.group).joinedload(CustomerGroup.price_list))
        .join(CustomerGroup)
        .filter(
            CustomerGroupMember.customer_id == customer_id,
            CustomerGroup.price_list_id != None,
        )
        .all()
    )


def get_price_list_items(
    db: Session, price_list_id: int, part_id: int, quantity: int, now: datetime
) -> List[PriceListItem]:
    """Items vigentes en `now` cuyo escalón de cantidad ya se alcanzó."""
    return (
        db.query(PriceListItem)
        .filter(
            PriceListItem.price_list_id == price_list_id,
            PriceListItem.part_id == part_id,
            PriceListItem.min_quantity <= quantity,
            PriceListItem.valid_from <= now,
            or_(PriceListItem.valid_to == None, PriceListItem.valid_to > now),
        )
        .all()
    )


# --- Markup ---

def get_markup_candidates(db: Session, category: Optional[str], cost: Decimal) -> List[MarkupRule]:
    """Reglas activas de la categoría (o genéricas) cuya banda contiene el costo."""
    return (
        db.query(MarkupRule)
        .filter(
            MarkupRule.is_active == True,
            or_(MarkupRule.category == category, MarkupRule.category == None),
            or_(MarkupRule.band_from == None, MarkupRule.band_from <= cost),
            or_(MarkupRule.band_to == None, MarkupRule.band_to > cost),
        )
        .all()
    )


def get_active_markup_rules(db: Session) -> List[MarkupRule]:
    return db.query(MarkupRule).filter(MarkupRule.is_active == True).all()


# --- Descuentos ---

def get_active_discount_rules(db: Session, now: datetime) -> List[DiscountRule]:
    return (
        db.query(DiscountRule)
        .filter(
            DiscountRule.is_active == True,
            or_(DiscountRule.valid_from == None, DiscountRule.valid_from <= now),
            or_(DiscountRule.valid_to == None, DiscountRule.valid_to >= now),
        )
        .all()
    )


# --- Clientes / contratos ---

def get_latest_active_contract(db: Session, customer_id: int) -> Optional[RentalContract]:
    return (
        db.query(RentalContract)
        .filter(
            RentalContract.customer_id == customer_id,
            RentalContract.status == ContractStatus.ACTIVE,
        )
        .order_by(RentalContract.start_date.desc(), RentalContract.id.desc())
        .first()
    )


def get_first_contract(db: Session, customer_id: int) -> Optional[RentalContract]:
    return (
        db.query(RentalContract)
        .filter(RentalContract.customer_id == customer_id)
        .order_by(RentalContract.start_date.asc(), RentalContract.id.asc())
        .first()
    )


def customer_in_any_group(db: Session, customer_id: int) -> bool:
    return (
        db.query(CustomerGroupMember.id)
        .filter(CustomerGroupMember.customer_id == customer_id)
        .first()
        is not None
    )
