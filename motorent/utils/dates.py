from datetime import datetime, timezone


def utcnow() -> datetime:
    """Ahora en UTC sin tzinfo (las columnas DateTime se guardan naive en UTC)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)
