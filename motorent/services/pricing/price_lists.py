import logging
from datetime import datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from motorent.crud import pricing as store
from motorent.models import Part, PriceList, PriceListItem
from motorent.utils.dates import utcnow
from motorent.utils.decimals import to_decimal
from .config import PricingConfig
from .exceptions import ListNotFound, NoDefaultList
from .markup import MarkupCalculator, cost_basis
from .models import BasePrice, ResolutionMethod

logger = logging.getLogger(__name__)


def list_item_key(item: PriceListItem):
    """Mayor escalón de cantidad, luego vigencia más reciente, luego el último cargado."""
    return (item.min_quantity or 0, item.valid_from, item.id or 0)


def pick_list_item(items, quantity: int, now: datetime) -> Optional[PriceListItem]:
    candidates = [
        i for i in items
        if (i.min_quantity or 0) <= quantity
        and i.valid_from <= now
        and (i.valid_to is None or i.valid_to > now)
    ]
    if not candidates:
        return None
    return sorted(candidates, key=list_item_key, reverse=True)[0]


class PriceListResolver:
    """
    Determina la lista de precios aplicable y el precio base del repuesto.

    Lista: código explícito -> lista del grupo del cliente -> lista retail por defecto.
    Precio: lista auto-calculada -> item de lista -> markup.
    """

    def __init__(self, db: Session, config: PricingConfig, markup: Optional[MarkupCalculator] = None):
        self.db = db
        self.config = config
        self.markup = markup or MarkupCalculator(db, config)

    def default_list(self) -> PriceList:
        price_list = store.get_price_list_by_code(self.db, self.config.default_list_code)
        if not price_list:
            raise NoDefaultList(self.config.default_list_code)
        return price_list

    def select_list(self, customer_id: Optional[int] = None, list_code: Optional[str] = None) -> PriceList:
        if list_code:
            price_list = store.get_price_list_by_code(self.db, list_code)
            if not price_list:
                raise ListNotFound(list_code)
            return price_list

        if customer_id:
            memberships = store.get_customer_group_lists(self.db, customer_id)
            if memberships:
                # Si el cliente está en varios grupos gana la lista de mayor prioridad
                best = sorted(
                    memberships,
                    key=lambda m: (-(m.group.price_list.priority or 0), m.id),
                )[0]
                logger.debug("Cliente %s -> grupo %s -> lista %s",
                             customer_id, best.group.name, best.group.price_list.code)
                return best.group.price_list

        return self.default_list()

    def resolve(
        self,
        part: Part,
        customer_id: Optional[int] = None,
        list_code: Optional[str] = None,
        quantity: int = 1,
        now: Optional[datetime] = None,
        price_list: Optional[PriceList] = None,
    ) -> BasePrice:
        now = now or utcnow()
        price_list = price_list or self.select_list(customer_id, list_code)
        cost = cost_basis(part)

        # Listas costo + X (ej: Uso Interno)
        if price_list.auto_calculate and price_list.markup_formula:
            if cost <= 0:
                logger.warning("Repuesto %s sin costo en lista auto %s", part.id, price_list.code)
                return BasePrice(price_list=price_list, price=Decimal(0),
                                 method=ResolutionMethod.NO_COST, detail="Sin costo")
            formula = to_decimal(price_list.markup_formula)
            return BasePrice(
                price_list=price_list,
                price=cost * formula,
                method=ResolutionMethod.AUTO,
                detail=f"Auto-calculado (costo × {formula.normalize():f})",
            )

        items = store.get_price_list_items(self.db, price_list.id, part.id, quantity, now)
        item = pick_list_item(items, quantity, now)
        if item:
            return BasePrice(
                price_list=price_list,
                price=to_decimal(item.price),
                method=ResolutionMethod.LIST_ITEM,
                detail=item.label or f"Precio de lista (desde {item.min_quantity} u.)",
            )

        result = self.markup.compute(part, cost)
        return BasePrice(
            price_list=price_list,
            price=result.price,
            method=result.source,
            detail=result.description,
        )
