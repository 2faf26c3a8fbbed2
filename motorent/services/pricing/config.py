"""
Snapshot versionado de la configuración de pricing.

El motor nunca lee la configuración global directamente: recibe un
PricingConfig, de modo que una resolución se puede reproducir contra
una configuración concreta (tests, simulaciones).
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from motorent.config import Settings, get_settings


@dataclass(frozen=True)
class PricingConfig:
    version: str = "default"
    default_list_code: str = "B2C"
    default_markup: Decimal = Decimal("2.0")
    default_margin_floor: Decimal = Decimal("0.15")
    default_margin_target: Decimal = Decimal("0.35")
    # Bandas de monto por período para inferir el plan del contrato
    plan_premium_threshold: Decimal = Decimal("150000")
    plan_vip_threshold: Decimal = Decimal("250000")
    days_per_month: int = 30

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "PricingConfig":
        settings = settings or get_settings()
        return cls(
            version=settings.pricing_config_version,
            default_list_code=settings.default_list_code,
            default_markup=Decimal(str(settings.default_markup)),
            default_margin_floor=Decimal(str(settings.default_margin_floor)),
            default_margin_target=Decimal(str(settings.default_margin_target)),
            plan_premium_threshold=Decimal(str(settings.plan_premium_threshold)),
            plan_vip_threshold=Decimal(str(settings.plan_vip_threshold)),
            days_per_month=settings.days_per_month,
        )
