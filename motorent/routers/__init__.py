# motorent/routers/__init__.py

# Esto expone los módulos para que "from motorent.routers import pricing" funcione
from . import pricing
