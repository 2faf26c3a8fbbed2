"""Configuración centralizada de logging.
Llamar setup_logging() una sola vez al arrancar la aplicación.
"""
import logging
import sys


def setup_logging(level: str = "INFO") -> None:
    """Configura el handler raíz con un formato legible en consola."""
    root = logging.getLogger()
    # Evitar handlers duplicados si se llama más de una vez (ej. --reload)
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    root.addHandler(handler)

    # Silenciar librerías ruidosas
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)
