"""
Estructuras de datos del motor de precios.

Usa dataclasses para que cada resolución sea explicable: qué lista,
qué método, qué descuentos y qué pasos se aplicaron.
"""
import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from motorent.models import PriceList, MarkupRule, DiscountRule


class AlertLevel(str, enum.Enum):
    OK = "OK"
    LOW = "LOW"             # Por debajo del margen objetivo (informativo)
    CRITICAL = "CRITICAL"   # Se forzó el piso de margen


class ResolutionMethod(str, enum.Enum):
    AUTO = "auto"                           # Lista costo × fórmula
    LIST_ITEM = "list-item"                 # Precio explícito en la lista
    MARKUP_RULE = "markup-rule"             # Banda de markup
    CATEGORY_DEFAULT = "category-default"   # Markup por defecto de la categoría
    NO_COST = "no-cost"                     # Repuesto sin costo cargado


@dataclass
class TraceStep:
    """Un paso de la traza de resolución."""
    step: str
    description: str
    value: Optional[str] = None


@dataclass
class MarkupPrice:
    price: Decimal
    source: ResolutionMethod
    description: str
    rule: Optional[MarkupRule] = None


@dataclass
class BasePrice:
    price_list: PriceList
    price: Decimal
    method: ResolutionMethod
    detail: str


@dataclass
class ApplicableDiscount:
    """Regla que pasó su condición, con su valor efectivo ya como Decimal."""
    rule: DiscountRule
    value: Decimal

    @property
    def name(self) -> str:
        return self.rule.name

    @property
    def accumulable(self) -> bool:
        return bool(self.rule.accumulable)

    @property
    def priority(self) -> int:
        return self.rule.priority or 0


@dataclass
class AppliedDiscount:
    name: str
    type: str
    value: Decimal


@dataclass
class GuardrailOutcome:
    price: Decimal
    margin: Decimal
    alert_level: AlertLevel


@dataclass
class ResolutionResult:
    """Resultado completo y auditable de una resolución de precio."""
    part_id: int
    part_name: str
    category: Optional[str]

    retail_reference_price: Decimal
    final_price: Decimal
    applied_list_code: str
    resolution_method: ResolutionMethod
    resolution_detail: str

    discounts_applied: list[AppliedDiscount] = field(default_factory=list)
    total_discount_percent: Decimal = Decimal(0)
    savings_amount: Decimal = Decimal(0)

    cost_basis: Decimal = Decimal(0)
    resulting_margin: Decimal = Decimal(0)
    margin_floor: Decimal = Decimal(0)
    margin_target: Decimal = Decimal(0)
    alert_level: AlertLevel = AlertLevel.OK

    config_version: Optional[str] = None
    trace: list[TraceStep] = field(default_factory=list)

    def get_trace_text(self) -> str:
        """Traza legible, un paso por línea."""
        lines = []
        for t in self.trace:
            if t.value:
                lines.append(f"• {t.step}: {t.description} = {t.value}")
            else:
                lines.append(f"• {t.step}: {t.description}")
        return "\n".join(lines)
