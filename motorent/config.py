"""
Configuración de la aplicación usando Pydantic Settings.
Los valores se leen de variables de entorno con prefijo MOTORENT_ o de un .env.
"""
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Configuración cargada desde el entorno."""

    # ── App ──────────────────────────────────────────────
    app_name: str = "Motorent Back-Office - Pricing Repuestos"
    debug: bool = False

    # ── Base de datos ────────────────────────────────────
    database_url: str = "sqlite:///./motorent.db"

    # ── Pricing ──────────────────────────────────────────
    pricing_config_version: str = "2024.1"
    default_list_code: str = "B2C"
    default_markup: float = 2.0
    default_margin_floor: float = 0.15
    default_margin_target: float = 0.35
    plan_premium_threshold: float = 150000
    plan_vip_threshold: float = 250000
    days_per_month: int = 30

    # ── Logging ──────────────────────────────────────────
    log_level: str = "INFO"

    model_config = {
        "env_prefix": "MOTORENT_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """Devuelve la configuración cacheada (singleton)."""
    return Settings()
