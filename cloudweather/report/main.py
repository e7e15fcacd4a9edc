import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from ..db import check_connection
from ..web import add_cors, configure_logging
from ..window import MAX_DAYS, MIN_DAYS, parse_days
from .aggregator import build_weekly_report
from .database import Base, SessionLocal, engine, get_db
from .models import WeatherReport

configure_logging()
logger = logging.getLogger(__name__)

DAYS_ERROR = f"Please provide a days parameter with a value between {MIN_DAYS} and {MAX_DAYS}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Report service started")
    yield


# ------------------------------------------------------------
# Configuración principal
# ------------------------------------------------------------
app = FastAPI(title="CloudWeather – Report API", version="1.0.0", lifespan=lifespan)
add_cors(app)


@app.get("/health")
async def health():
    """OK si el proceso está vivo; 'database' indica si la base responde."""
    return {"status": "ok", "database": "up" if check_connection(SessionLocal) else "down"}


@app.get("/weather-report/{zip_code}", response_model=WeatherReport)
async def get_weather_report(
    zip_code: str,
    days: Optional[str] = Query(None, description="Días hacia atrás (1-30)"),
    db: Session = Depends(get_db),
):
    # 1) Validar ventana antes de tocar a los proveedores
    n_days = parse_days(days)
    if n_days is None:
        return PlainTextResponse(DAYS_ERROR, status_code=400)

    # 2) Agregar, guardar y devolver
    return await build_weekly_report(zip_code, n_days, db)
