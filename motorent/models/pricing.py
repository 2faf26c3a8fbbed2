# motorent/models/pricing.py
import enum
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, Enum, Numeric
from sqlalchemy.orm import relationship

from motorent.database import Base


# --- Enums ---
class PriceListType(str, enum.Enum):
    RETAIL = "RETAIL"           # Público general
    PREFERRED = "PREFERRED"     # Riders con alquiler activo
    WHOLESALE = "WHOLESALE"     # Talleres externos
    INTERNAL = "INTERNAL"       # Uso interno de flota

class RoundingMode(str, enum.Enum):
    NONE = "NONE"
    NEAREST_10 = "NEAREST_10"
    NEAREST_50 = "NEAREST_50"
    NEAREST_99 = "NEAREST_99"   # Precio "charm": termina en 99

class ConditionType(str, enum.Enum):
    ALWAYS = "ALWAYS"
    QUANTITY = "QUANTITY"
    CATEGORY = "CATEGORY"
    RENTAL_PLAN = "RENTAL_PLAN"
    CUSTOMER_TENURE = "CUSTOMER_TENURE"
    CUSTOMER_GROUP = "CUSTOMER_GROUP"

class DiscountType(str, enum.Enum):
    PERCENTAGE = "PERCENTAGE"       # value = 0.10 -> 10%
    FIXED_AMOUNT = "FIXED_AMOUNT"   # value = monto en moneda local

class PlanTier(str, enum.Enum):
    BASIC = "BASIC"
    PREMIUM = "PREMIUM"
    VIP = "VIP"


# --- Modelo 1: Lista de Precios ---
class PriceList(Base):
    __tablename__ = "price_lists"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    code = Column(String, unique=True, index=True, nullable=False)  # Ej: B2C, RIDER, TALLER
    list_type = Column(Enum(PriceListType), default=PriceListType.RETAIL, nullable=False)
    priority = Column(Integer, default=0)

    global_discount_pct = Column(Numeric(5, 4), nullable=True)  # Ej: 0.10 -> 10% sobre toda la lista

    # Listas "costo + X" (ej: Uso Interno)
    auto_calculate = Column(Boolean, default=False)
    markup_formula = Column(Numeric(6, 3), nullable=True)

    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True)

    items = relationship("PriceListItem", back_populates="price_list", cascade="all, delete-orphan")


# --- Modelo 2: Item de Lista (precio explícito, escalonado por cantidad) ---
class PriceListItem(Base):
    __tablename__ = "price_list_items"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    price_list_id = Column(Integer, ForeignKey("price_lists.id"), nullable=False, index=True)
    part_id = Column(Integer, ForeignKey("parts.id"), nullable=False, index=True)

    price = Column(Numeric(12, 2), nullable=False)
    min_quantity = Column(Integer, default=1, nullable=False)  # A partir de cuántas piezas

    # Vigencia [desde, hasta)
    valid_from = Column(DateTime, nullable=False)
    valid_to = Column(DateTime, nullable=True)

    label = Column(String, nullable=True)  # Nota de cálculo, ej: "Precio negociado"

    price_list = relationship("PriceList", back_populates="items")
    part = relationship("Part")


# --- Modelo 3: Regla de Markup por banda de costo ---
class MarkupRule(Base):
    __tablename__ = "markup_rules"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    category = Column(String, index=True, nullable=True)  # null = regla genérica

    # Banda de costo [desde, hasta)
    band_from = Column(Numeric(12, 2), nullable=True)
    band_to = Column(Numeric(12, 2), nullable=True)

    is_oem = Column(Boolean, nullable=True)  # null = aplica a OEM y alternativos

    multiplier = Column(Numeric(6, 3), nullable=False)
    rounding = Column(Enum(RoundingMode), default=RoundingMode.NONE, nullable=False)
    priority = Column(Integer, default=0)
    is_active = Column(Boolean, default=True)


# --- Modelo 4: Regla de Descuento ---
class DiscountRule(Base):
    __tablename__ = "discount_rules"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)

    condition_type = Column(Enum(ConditionType), nullable=False)
    # Parámetros de condición (solo se usa el que corresponde al tipo)
    min_quantity = Column(Integer, nullable=True)
    category = Column(String, nullable=True)
    rental_plan = Column(Enum(PlanTier), nullable=True)
    tenure_months = Column(Integer, nullable=True)

    discount_type = Column(Enum(DiscountType), default=DiscountType.PERCENTAGE, nullable=False)
    value = Column(Numeric(12, 4), nullable=False)

    accumulable = Column(Boolean, default=False)
    priority = Column(Integer, default=0)

    # Vigencia opcional (ambos extremos inclusivos)
    valid_from = Column(DateTime, nullable=True)
    valid_to = Column(DateTime, nullable=True)

    is_active = Column(Boolean, default=True)
