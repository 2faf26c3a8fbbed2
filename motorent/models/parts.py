# motorent/models/parts.py
from sqlalchemy import Column, Integer, String, Boolean, Numeric, DateTime
from sqlalchemy.sql import func

from motorent.database import Base


# --- REPUESTO ---
class Part(Base):
    """
    Repuesto del catálogo. El motor de precios solo lo lee;
    los costos los actualizan los flujos de inventario/costeo.
    """
    __tablename__ = "parts"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=True)  # Código interno / SKU
    name = Column(String, index=True, nullable=False)
    category = Column(String, index=True, nullable=True)  # Ej: FRENOS, MOTOR, FILTROS
    is_oem = Column(Boolean, default=False)

    # Costos
    avg_landed_cost = Column(Numeric(12, 2), default=0)  # Costo promedio puesto en depósito (moneda local)
    avg_cost_usd = Column(Numeric(12, 2), default=0)     # Costo promedio en moneda extranjera
    purchase_price = Column(Numeric(12, 2), default=0)   # Último precio de compra

    # Precio de venta publicado (referencia)
    sale_price = Column(Numeric(12, 2), default=0)

    # Overrides de margen por repuesto (null = usar la categoría)
    margin_floor = Column(Numeric(5, 4), nullable=True)
    margin_target = Column(Numeric(5, 4), nullable=True)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())


# --- CONFIGURACIÓN POR CATEGORÍA ---
class CategoryConfig(Base):
    __tablename__ = "category_configs"
    __table_args__ = {'extend_existing': True}

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)

    markup_default = Column(Numeric(6, 3), default=2.0)  # Multiplicador de respaldo
    margin_floor = Column(Numeric(5, 4), default=0.15)   # Margen mínimo
    margin_target = Column(Numeric(5, 4), default=0.35)  # Margen objetivo
