from datetime import datetime, timedelta
from typing import Optional

MIN_DAYS = 1
MAX_DAYS = 30


def parse_days(raw: Optional[str]) -> Optional[int]:
    """
    Devuelve el número de días si es un entero dentro de [MIN_DAYS, MAX_DAYS].
    Cualquier otro valor (ausente, no numérico, fuera de rango) -> None.
    """
    if raw is None:
        return None
    try:
        days = int(raw)
    except ValueError:
        return None
    if days < MIN_DAYS or days > MAX_DAYS:
        return None
    return days


def window_start(days: int, now: datetime) -> datetime:
    # ventana semiabierta (now - days, now]
    return now - timedelta(days=days)
