"""Tabla de informes y su esquema de respuesta."""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, Numeric, String

from ..observations import JsonDecimal, WireModel
from .database import Base


class WeatherReportRecord(Base):
    """Informe agregado. Solo se inserta; nunca se actualiza ni se borra."""

    __tablename__ = "weather_report"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    zip_code = Column(String(16), nullable=False, index=True)
    created_on = Column(DateTime(timezone=True), nullable=False, index=True)
    average_high_f = Column(Numeric(6, 1), nullable=True)
    average_low_f = Column(Numeric(6, 1), nullable=True)
    rain_fall_total_inches = Column(Numeric(8, 1), nullable=False)
    snow_total_inches = Column(Numeric(8, 1), nullable=False)


class WeatherReport(WireModel):
    id: str
    zip_code: str
    created_on: datetime
    # None cuando no hubo observaciones de temperatura en la ventana
    average_high_f: Optional[JsonDecimal] = None
    average_low_f: Optional[JsonDecimal] = None
    rain_fall_total_inches: JsonDecimal
    snow_total_inches: JsonDecimal
