from datetime import datetime, timezone
from decimal import Decimal
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator
from pydantic.alias_generators import to_camel

RAIN = "rain"
SNOW = "snow"

# Decimal en memoria, número en el JSON de salida (no string)
JsonDecimal = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def to_utc(value: datetime) -> datetime:
    # sin zona -> se asume UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class WireModel(BaseModel):
    """Modelo base: camelCase en el cable, snake_case en Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class PrecipitationObservation(WireModel):
    zip_code: str = Field(..., min_length=1)
    weather_type: str
    amount_inches: JsonDecimal = Field(..., ge=0)
    observed_at: datetime = Field(..., alias="createdOn")

    @field_validator("weather_type")
    @classmethod
    def _lower_type(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("observed_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_utc(v)


class TemperatureObservation(WireModel):
    zip_code: str = Field(..., min_length=1)
    temp_high_f: JsonDecimal
    temp_low_f: JsonDecimal
    observed_at: datetime = Field(..., alias="createdOn")

    @field_validator("observed_at")
    @classmethod
    def _utc(cls, v: datetime) -> datetime:
        return to_utc(v)
