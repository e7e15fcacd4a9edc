import uuid

from sqlalchemy import Column, DateTime, Numeric, String

from .database import Base


class Precipitation(Base):
    """Observación de precipitación tal como llega del productor (solo inserción)."""

    __tablename__ = "precipitation"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    zip_code = Column(String(16), nullable=False, index=True)
    weather_type = Column(String(32), nullable=False)
    # NUMERIC sin escala: se guarda la cantidad tal como llega, sin redondeo
    amount_inches = Column(Numeric(), nullable=False)
    observed_at = Column("created_on", DateTime(timezone=True), nullable=False, index=True)
