import logging
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from motorent.crud import pricing as store
from motorent.utils.dates import utcnow
from motorent.utils.decimals import to_decimal, quantize, FOUR_PLACES, TWO_PLACES
from .config import PricingConfig
from .discounts import DiscountEvaluator, apply_discounts
from .exceptions import InvalidInput, NoDefaultList, PartNotFound, PricingError
from .guardrail import MarginGuardrail, margin_targets
from .markup import MarkupCalculator, cost_basis
from .models import ResolutionResult, TraceStep
from .price_lists import PriceListResolver
from .rounding import round_to_unit

logger = logging.getLogger(__name__)


class PriceResolutionService:
    """
    Orquesta una resolución de precio completa:

    1. Repuesto (PartNotFound si no existe)
    2. Lista de precios -> precio base (item de lista, auto o markup)
    3. Precio retail de referencia (misma resolución forzada a la lista por defecto)
    4. Descuento global de la lista
    5. Reglas de descuento (mejor no acumulable + acumulables en cascada)
    6. Guardrail de margen mínimo
    7. Redondeo a unidades enteras

    Solo lee; nunca escribe precios ni historial.
    """

    def __init__(self, db: Session, config: Optional[PricingConfig] = None,
                 clock: Callable = utcnow):
        self.db = db
        self.config = config or PricingConfig.from_settings()
        self.clock = clock
        self.markup = MarkupCalculator(db, self.config)
        self.price_lists = PriceListResolver(db, self.config, self.markup)
        self.discounts = DiscountEvaluator(db, self.config)
        self.guardrail = MarginGuardrail()

    def resolve_price(self, part_id, customer_id: Optional[int] = None,
                      list_code: Optional[str] = None, quantity: int = 1) -> ResolutionResult:
        if part_id is None:
            raise InvalidInput("partId es requerido")
        if quantity is None or quantity < 1:
            raise InvalidInput("quantity debe ser un entero >= 1")

        now = self.clock()
        trace: List[TraceStep] = []

        def step(name, description, value=None):
            trace.append(TraceStep(step=name, description=description,
                                   value=None if value is None else str(value)))

        # 1. Repuesto
        part = store.get_part(self.db, part_id)
        if not part:
            raise PartNotFound(part_id)
        cost = cost_basis(part)
        step("Repuesto", f"{part.name} ({part.category or 'sin categoría'})", cost)

        # 2. Lista y precio base
        base = self.price_lists.resolve(part, customer_id, list_code, quantity, now)
        price_list = base.price_list
        step("Lista de precios", f"Lista aplicada {price_list.code}", price_list.name)
        step("Precio base", base.detail, base.price)

        # 3. Referencia retail
        retail_reference = self._retail_reference(part, base, quantity, now)
        step("Referencia retail", f"Lista {self.config.default_list_code}", retail_reference)

        # 4. Descuento global de la lista
        price = base.price
        global_pct = to_decimal(price_list.global_discount_pct)
        if global_pct > 0:
            price = price * (1 - global_pct)
            step("Descuento de lista", f"{global_pct * 100:.2f}% lista {price_list.code}", price)

        # 5. Reglas de descuento
        applicable = self.discounts.evaluate(part, customer_id, quantity, now)
        price, applied = apply_discounts(price, applicable)
        for discount in applied:
            step("Descuento", f"{discount.name} ({discount.type} {discount.value})")
        if applied:
            step("Precio con descuentos", f"{len(applied)} regla(s) aplicada(s)", price)

        # 6. Guardrail de margen
        category_config = store.get_category_config(self.db, part.category)
        margin_floor, margin_target = margin_targets(part, category_config, self.config)
        outcome = self.guardrail.enforce(price, cost, margin_floor, margin_target)
        step("Guardrail de margen",
             f"mínimo {margin_floor}, objetivo {margin_target}, alerta {outcome.alert_level.value}",
             outcome.price)

        # 7. Redondeo final
        final_price = round_to_unit(outcome.price)
        step("Precio final", "Redondeo a unidades", final_price)

        if retail_reference > 0:
            total_discount_pct = (retail_reference - final_price) / retail_reference
        else:
            total_discount_pct = Decimal(0)

        result = ResolutionResult(
            part_id=part.id,
            part_name=part.name,
            category=part.category,
            retail_reference_price=retail_reference,
            final_price=final_price,
            applied_list_code=price_list.code,
            resolution_method=base.method,
            resolution_detail=base.detail,
            discounts_applied=applied,
            total_discount_percent=quantize(total_discount_pct, FOUR_PLACES),
            savings_amount=quantize(retail_reference - final_price, TWO_PLACES),
            cost_basis=cost,
            resulting_margin=quantize(outcome.margin, FOUR_PLACES),
            margin_floor=margin_floor,
            margin_target=margin_target,
            alert_level=outcome.alert_level,
            config_version=self.config.version,
            trace=trace,
        )
        logger.info(
            "Precio resuelto repuesto=%s lista=%s metodo=%s final=%s alerta=%s",
            part.id, price_list.code, base.method.value, final_price, outcome.alert_level.value,
        )
        logger.debug("Traza repuesto %s:\n%s", part.id, result.get_trace_text())
        return result

    def _retail_reference(self, part, base, quantity: int, now) -> Decimal:
        """Precio base que tendría el repuesto en la lista retail por defecto."""
        if base.price_list.code == self.config.default_list_code:
            return base.price
        try:
            default_list = self.price_lists.default_list()
        except NoDefaultList:
            logger.warning("Sin lista %s para referencia retail; se usa el precio base",
                           self.config.default_list_code)
            return base.price
        reference = self.price_lists.resolve(part, quantity=quantity, now=now, price_list=default_list)
        return reference.price

    def resolve_many(self, part_ids, customer_id: Optional[int] = None,
                     list_code: Optional[str] = None, quantity: int = 1) -> list:
        """
        Resuelve varios repuestos. Un repuesto que falla no corta al resto:
        devuelve (part_id, ResolutionResult | None, mensaje de error | None).
        """
        results = []
        for part_id in part_ids:
            try:
                results.append((part_id, self.resolve_price(part_id, customer_id, list_code, quantity), None))
            except PricingError as e:
                results.append((part_id, None, str(e)))
            except Exception:
                logger.exception("Error resolviendo precio del repuesto %s", part_id)
                results.append((part_id, None, "Error al resolver precio"))
        return results
