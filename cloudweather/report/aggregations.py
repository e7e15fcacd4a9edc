from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from statistics import mean
from typing import Iterable, Optional, Sequence, TypeVar

from ..observations import RAIN, SNOW, PrecipitationObservation, TemperatureObservation, WireModel

ONE_PLACE = Decimal("0.1")

Obs = TypeVar("Obs", bound=WireModel)


def round_one(value: Decimal) -> Decimal:
    # redondeo bancario a 1 decimal, igual para sumas y medias
    return value.quantize(ONE_PLACE, rounding=ROUND_HALF_EVEN)


def in_window(observations: Iterable[Obs], start: datetime) -> list[Obs]:
    return [o for o in observations if o.observed_at > start]


def total_precipitation(observations: Iterable[PrecipitationObservation], weather_type: str) -> Decimal:
    total = sum(
        (o.amount_inches for o in observations if o.weather_type == weather_type),
        Decimal("0"),
    )
    return round_one(total)


def average(values: Sequence[Decimal]) -> Optional[Decimal]:
    # media de un conjunto vacío -> None ("sin datos"), nunca ZeroDivisionError
    if not values:
        return None
    return round_one(mean(values))


def summarize(
    precipitation: Sequence[PrecipitationObservation],
    temperature: Sequence[TemperatureObservation],
) -> dict:
    return {
        "rain_fall_total_inches": total_precipitation(precipitation, RAIN),
        "snow_total_inches": total_precipitation(precipitation, SNOW),
        "average_high_f": average([t.temp_high_f for t in temperature]),
        "average_low_f": average([t.temp_low_f for t in temperature]),
    }
