"""
Motor de resolución de precios de repuestos.

Orden fijo: lista de precios (o markup) -> descuento global de la lista
-> reglas de descuento -> guardrail de margen -> redondeo final.
"""
from .config import PricingConfig
from .exceptions import PricingError, PartNotFound, ListNotFound, NoDefaultList, InvalidInput
from .models import ResolutionResult, AppliedDiscount, TraceStep
from .resolver import PriceResolutionService

__all__ = [
    "PricingConfig",
    "PricingError",
    "PartNotFound",
    "ListNotFound",
    "NoDefaultList",
    "InvalidInput",
    "ResolutionResult",
    "AppliedDiscount",
    "TraceStep",
    "PriceResolutionService",
]
