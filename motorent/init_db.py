"""
Seed de pricing de repuestos: listas, bandas de markup, reglas de descuento,
configuración por categoría y algunos repuestos de ejemplo.

Idempotente: se puede correr varias veces.
    python -m motorent.init_db
"""
import logging
from decimal import Decimal

from motorent.database import SessionLocal, engine, Base
from motorent.models import (
    Part, CategoryConfig, PriceList, PriceListType, MarkupRule, RoundingMode,
    DiscountRule, ConditionType, DiscountType, PlanTier,
)
from motorent.config import get_settings
from motorent.utils.logger import setup_logging

logger = logging.getLogger(__name__)

PRICE_LISTS = [
    dict(name="B2C Retail", code="B2C", list_type=PriceListType.RETAIL, priority=0,
         description="Precio público para venta directa y e-commerce"),
    dict(name="Rider Activo", code="RIDER", list_type=PriceListType.PREFERRED, priority=10,
         global_discount_pct=Decimal("0.10"),
         description="Riders con moto en alquiler activo. Descuento base 10%"),
    dict(name="Taller Externo", code="TALLER", list_type=PriceListType.WHOLESALE, priority=5,
         global_discount_pct=Decimal("0.20"),
         description="Talleres mecánicos externos con acuerdo comercial"),
    dict(name="Uso Interno Flota", code="INTERNO", list_type=PriceListType.INTERNAL, priority=20,
         auto_calculate=True, markup_formula=Decimal("1.05"),
         description="Mantenimiento de flota propia. Precio = costo + 5%"),
]

MARKUP_RULES = [
    dict(name="Banda Ultra Low (< $2.000)", band_from=0, band_to=2000,
         multiplier=Decimal("3.0"), rounding=RoundingMode.NEAREST_50, priority=10),
    dict(name="Banda Low ($2.000 - $15.000)", band_from=2000, band_to=15000,
         multiplier=Decimal("2.5"), rounding=RoundingMode.NEAREST_50, priority=9),
    dict(name="Banda Medium ($15.000 - $50.000)", band_from=15000, band_to=50000,
         multiplier=Decimal("2.0"), rounding=RoundingMode.NEAREST_99, priority=8),
    dict(name="Banda High ($50.000 - $150.000)", band_from=50000, band_to=150000,
         multiplier=Decimal("1.85"), rounding=RoundingMode.NEAREST_99, priority=7),
    dict(name="Banda Premium (> $150.000)", band_from=150000, band_to=None,
         multiplier=Decimal("1.65"), rounding=RoundingMode.NEAREST_99, priority=6),
]

DISCOUNT_RULES = [
    # Por plan de alquiler (no acumulables: gana el mejor)
    dict(name="Descuento Plan Básico", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.BASIC,
         value=Decimal("0.05"), priority=10),
    dict(name="Descuento Plan Premium", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.PREMIUM,
         value=Decimal("0.10"), priority=11),
    dict(name="Descuento Plan VIP", condition_type=ConditionType.RENTAL_PLAN, rental_plan=PlanTier.VIP,
         value=Decimal("0.15"), priority=12),
    # Por antigüedad (acumulables)
    dict(name="Antigüedad 6+ meses", condition_type=ConditionType.CUSTOMER_TENURE, tenure_months=6,
         value=Decimal("0.02"), accumulable=True, priority=5),
    dict(name="Antigüedad 1+ año", condition_type=ConditionType.CUSTOMER_TENURE, tenure_months=12,
         value=Decimal("0.05"), accumulable=True, priority=6),
    dict(name="Antigüedad 2+ años", condition_type=ConditionType.CUSTOMER_TENURE, tenure_months=24,
         value=Decimal("0.08"), accumulable=True, priority=7),
    # Por cantidad (acumulables)
    dict(name="Descuento 10+ unidades", condition_type=ConditionType.QUANTITY, min_quantity=10,
         value=Decimal("0.05"), accumulable=True, priority=3),
    dict(name="Descuento 50+ unidades", condition_type=ConditionType.QUANTITY, min_quantity=50,
         value=Decimal("0.10"), accumulable=True, priority=4),
]

# categoría, nombre, margen objetivo, margen mínimo, markup default
CATEGORY_CONFIGS = [
    ("FRENOS", "Frenos", "0.45", "0.30", "1.82"),
    ("MOTOR", "Motor", "0.50", "0.35", "2.0"),
    ("SUSPENSION", "Suspensión", "0.50", "0.35", "2.0"),
    ("TRANSMISION", "Transmisión", "0.50", "0.35", "2.0"),
    ("ELECTRICO", "Eléctrico", "0.50", "0.35", "2.0"),
    ("NEUMATICOS", "Neumáticos", "0.30", "0.15", "1.43"),
    ("FILTROS", "Filtros", "0.60", "0.45", "2.5"),
    ("ACEITES", "Aceites y Lubricantes", "0.35", "0.20", "1.54"),
    ("GENERAL", "General", "0.40", "0.25", "1.67"),
]

# código, nombre, categoría, costo puesto (ARS)
SAMPLE_PARTS = [
    ("PAS-001", "Pastillas de freno delanteras", "FRENOS", "4800"),
    ("FIL-001", "Filtro de aceite", "FILTROS", "1500"),
    ("ACE-001", "Aceite 10W40 1L", "ACEITES", "6200"),
    ("KIT-001", "Kit de arrastre", "TRANSMISION", "38000"),
    ("NEU-001", "Cubierta trasera 90/90-18", "NEUMATICOS", "52000"),
    ("BAT-001", "Batería 12V 5Ah", "ELECTRICO", "27500"),
]


def init_db():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    logger.info("--- INICIANDO SEED DE PRICING ---")
    try:
        # 1. Listas de precios
        for data in PRICE_LISTS:
            if not db.query(PriceList).filter(PriceList.code == data["code"]).first():
                db.add(PriceList(**data))
        db.commit()
        logger.info("%s listas de precios aseguradas.", len(PRICE_LISTS))

        # 2. Bandas de markup
        for data in MARKUP_RULES:
            if not db.query(MarkupRule).filter(MarkupRule.name == data["name"]).first():
                db.add(MarkupRule(**data))
        db.commit()
        logger.info("%s reglas de markup aseguradas.", len(MARKUP_RULES))

        # 3. Reglas de descuento
        for data in DISCOUNT_RULES:
            if not db.query(DiscountRule).filter(DiscountRule.name == data["name"]).first():
                db.add(DiscountRule(discount_type=DiscountType.PERCENTAGE, **data))
        db.commit()
        logger.info("%s reglas de descuento aseguradas.", len(DISCOUNT_RULES))

        # 4. Configuración por categoría
        for category, name, target, floor, markup in CATEGORY_CONFIGS:
            if not db.query(CategoryConfig).filter(CategoryConfig.category == category).first():
                db.add(CategoryConfig(
                    category=category, name=name,
                    margin_target=Decimal(target), margin_floor=Decimal(floor),
                    markup_default=Decimal(markup),
                ))
        db.commit()
        logger.info("Configuración de categorías asegurada.")

        # 5. Repuestos de ejemplo
        count_new = 0
        for code, name, category, cost in SAMPLE_PARTS:
            if db.query(Part).filter(Part.code == code).first():
                continue
            db.add(Part(
                code=code, name=name, category=category,
                avg_landed_cost=Decimal(cost), purchase_price=Decimal(cost),
            ))
            count_new += 1
        db.commit()
        logger.info("--- SEED TERMINADO ---. Repuestos nuevos: %s", count_new)
    finally:
        db.close()


if __name__ == "__main__":
    setup_logging(get_settings().log_level)
    init_db()
