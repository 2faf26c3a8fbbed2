from typing import Optional, List
from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from motorent.services.pricing.models import AlertLevel, ResolutionMethod


# El front-end habla camelCase (partId, listCode...); aceptamos ambos formatos
class CamelModel(BaseModel):
    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


# --- Resolución individual ---
class PriceResolveRequest(CamelModel):
    part_id: Optional[int] = None        # Se valida en el endpoint (400 si falta)
    customer_id: Optional[int] = None
    list_code: Optional[str] = None
    quantity: int = Field(1, ge=1)


class AppliedDiscountRead(CamelModel):
    name: str
    type: str       # PERCENTAGE | FIXED_AMOUNT
    value: float


class TraceStepRead(CamelModel):
    step: str
    description: str
    value: Optional[str] = None


class PriceResolutionRead(CamelModel):
    part_id: int
    part_name: str
    category: Optional[str] = None

    retail_reference_price: float
    final_price: float
    applied_list_code: str
    resolution_method: ResolutionMethod
    resolution_detail: str

    discounts_applied: List[AppliedDiscountRead] = []
    total_discount_percent: float
    savings_amount: float

    # Info de margen
    cost_basis: float
    resulting_margin: float
    margin_floor: float
    margin_target: float
    alert_level: AlertLevel

    config_version: Optional[str] = None
    trace: List[TraceStepRead] = []


# --- Resolución masiva ---
class BulkResolveRequest(CamelModel):
    part_ids: Optional[List[int]] = None
    customer_id: Optional[int] = None
    list_code: Optional[str] = None
    quantity: int = Field(1, ge=1)


class BulkPriceEntry(CamelModel):
    part_id: int
    part_name: Optional[str] = None
    category: Optional[str] = None
    retail_reference_price: float = 0
    final_price: float = 0
    total_discount_percent: Optional[float] = None
    alert_level: Optional[AlertLevel] = None
    cost_basis: Optional[float] = None
    resulting_margin: Optional[float] = None
    error: Optional[str] = None


class BulkResolveResponse(CamelModel):
    prices: List[BulkPriceEntry] = []


# --- Sugerencias retail (preview) ---
class RetailSuggestionRequest(CamelModel):
    part_ids: Optional[List[int]] = None
    categories: Optional[List[str]] = None
    only_without_price: bool = False


class RetailSuggestionRead(CamelModel):
    part_id: int
    part_name: str
    category: Optional[str] = None
    cost: float
    current_price: float
    suggested_price: float
    current_margin: float
    new_margin: float
    rule_applied: str
    change_pct: float


class RetailSuggestionSummaryRead(CamelModel):
    total: int
    rising: int
    falling: int
    unchanged: int
    avg_current_margin: float
    avg_new_margin: float


class RetailSuggestionResponse(CamelModel):
    items: List[RetailSuggestionRead] = []
    summary: RetailSuggestionSummaryRead
