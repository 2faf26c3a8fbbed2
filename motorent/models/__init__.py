# motorent/models/__init__.py

# 1. Base de datos (Origen de la clase declarativa)
from motorent.database import Base

# 2. Catálogo de repuestos
from .parts import Part, CategoryConfig

# 3. Pricing (listas, markup, descuentos)
from .pricing import (
    PriceList,
    PriceListItem,
    MarkupRule,
    DiscountRule,
    PriceListType,
    RoundingMode,
    ConditionType,
    DiscountType,
    PlanTier,
)

# 4. Clientes, contratos y grupos
from .crm import (
    Customer,
    RentalContract,
    ContractStatus,
    CustomerGroup,
    CustomerGroupMember,
)
