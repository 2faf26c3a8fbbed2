import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from motorent.config import get_settings
from motorent.database import engine
from motorent.models import Base
from motorent.routers import pricing
from motorent.utils.logger import setup_logging

settings = get_settings()
setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

# 1. CREACIÓN AUTOMÁTICA DE TABLAS
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title=settings.app_name,
    description="Motor de resolución de precios de repuestos (listas, markup, descuentos y margen)",
    version="1.0.0",
)

# 2. CONFIGURACIÓN DE CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 3. REGISTRO DE ROUTERS
app.include_router(pricing.router, prefix="/api/pricing", tags=["💲 Pricing Repuestos"])


@app.get("/")
async def root():
    return {"status": "online", "app": settings.app_name}


# --- 4. MANEJO DE ERRORES ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # Body faltante o mal formado -> 400 (no 422)
    logger.info("Request inválido en %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"detail": "Datos de entrada inválidos", "errors": jsonable_errors(exc)},
    )


@app.exception_handler(404)
async def not_found_exception_handler(request: Request, exc):
    detail = getattr(exc, "detail", None) or "Recurso no encontrado"
    return JSONResponse(status_code=404, content={"detail": detail})


def jsonable_errors(exc: RequestValidationError):
    return [
        {"loc": list(err.get("loc", [])), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]
