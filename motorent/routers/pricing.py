# motorent/routers/pricing.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from motorent.database import get_db
from motorent.schemas.pricing import (
    PriceResolveRequest, PriceResolutionRead,
    BulkResolveRequest, BulkResolveResponse, BulkPriceEntry,
    RetailSuggestionRequest, RetailSuggestionResponse,
)
from motorent.services.pricing import (
    PricingConfig, PriceResolutionService,
    PartNotFound, ListNotFound, NoDefaultList, InvalidInput,
)
from motorent.services.pricing.suggestions import suggest_retail_prices

logger = logging.getLogger(__name__)

router = APIRouter()


def get_pricing_config() -> PricingConfig:
    return PricingConfig.from_settings()


def get_pricing_service(
    db: Session = Depends(get_db),
    config: PricingConfig = Depends(get_pricing_config),
) -> PriceResolutionService:
    return PriceResolutionService(db, config)


# --------------------------------------------------------------------------
# 1. RESOLVER PRECIO DE UN REPUESTO
# --------------------------------------------------------------------------
@router.post("/resolve", response_model=PriceResolutionRead)
def resolve_price(
    req: PriceResolveRequest,
    service: PriceResolutionService = Depends(get_pricing_service),
):
    """Precio final explicado: lista, método, descuentos, margen y alerta."""
    if req.part_id is None:
        raise HTTPException(status_code=400, detail="partId es requerido")

    try:
        result = service.resolve_price(
            part_id=req.part_id,
            customer_id=req.customer_id,
            list_code=req.list_code,
            quantity=req.quantity,
        )
    except PartNotFound:
        raise HTTPException(status_code=404, detail="Repuesto no encontrado")
    except (ListNotFound, InvalidInput) as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NoDefaultList as e:
        logger.error("Configuración de pricing incompleta: %s", e)
        raise HTTPException(status_code=500, detail="No se pudo determinar lista de precios")
    except Exception:
        # Nunca exponer detalles de reglas/consultas al cliente
        logger.exception("Error resolviendo precio del repuesto %s", req.part_id)
        raise HTTPException(status_code=500, detail="Error al resolver precio")

    return PriceResolutionRead.model_validate(result)


# --------------------------------------------------------------------------
# 2. RESOLVER PRECIOS EN LOTE
# --------------------------------------------------------------------------
@router.post("/resolve-bulk", response_model=BulkResolveResponse)
def resolve_prices_bulk(
    req: BulkResolveRequest,
    service: PriceResolutionService = Depends(get_pricing_service),
):
    if not req.part_ids:
        raise HTTPException(status_code=400, detail="partIds debe ser una lista no vacía")

    prices = []
    for part_id, result, error in service.resolve_many(req.part_ids, req.customer_id, req.list_code, req.quantity):
        if result is None:
            prices.append(BulkPriceEntry(part_id=part_id, error=error))
        else:
            prices.append(BulkPriceEntry.model_validate(result))

    return BulkResolveResponse(prices=prices)


# --------------------------------------------------------------------------
# 3. PREVIEW DE RECÁLCULO RETAIL (no modifica precios)
# --------------------------------------------------------------------------
@router.post("/retail-suggestions", response_model=RetailSuggestionResponse)
def retail_suggestions(
    req: RetailSuggestionRequest,
    db: Session = Depends(get_db),
    config: PricingConfig = Depends(get_pricing_config),
):
    try:
        report = suggest_retail_prices(
            db, config,
            part_ids=req.part_ids,
            categories=req.categories,
            only_without_price=req.only_without_price,
        )
    except Exception:
        logger.exception("Error calculando sugerencias retail")
        raise HTTPException(status_code=500, detail="Error al calcular precios")

    return RetailSuggestionResponse.model_validate(report)
