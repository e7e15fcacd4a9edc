import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, Query
from fastapi.responses import PlainTextResponse, Response
from sqlalchemy.orm import Session

from ..db import check_connection
from ..observations import PrecipitationObservation
from ..web import add_cors, configure_logging
from ..window import MAX_DAYS, MIN_DAYS, parse_days, window_start
from .database import Base, SessionLocal, engine, get_db
from .models import Precipitation

configure_logging()
logger = logging.getLogger(__name__)

DAYS_ERROR = f"Provide days query between {MIN_DAYS} and {MAX_DAYS}"


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info("Precipitation service started")
    yield


app = FastAPI(title="CloudWeather – Precipitation API", version="1.0.0", lifespan=lifespan)
add_cors(app)


@app.get("/health")
async def health():
    return {"status": "ok", "database": "up" if check_connection(SessionLocal) else "down"}


@app.get("/observation/{zip_code}", response_model=list[PrecipitationObservation])
async def get_observations(
    zip_code: str,
    days: Optional[str] = Query(None, description="Días hacia atrás (1-30)"),
    db: Session = Depends(get_db),
):
    n_days = parse_days(days)
    if n_days is None:
        return PlainTextResponse(DAYS_ERROR, status_code=400)

    start = window_start(n_days, datetime.now(timezone.utc))
    return (
        db.query(Precipitation)
        .filter(Precipitation.zip_code == zip_code, Precipitation.observed_at > start)
        .order_by(Precipitation.observed_at)
        .all()
    )


@app.post("/observation/")
async def create_observation(observation: PrecipitationObservation, db: Session = Depends(get_db)):
    # el esquema ya normalizó observed_at a UTC
    db.add(Precipitation(**observation.model_dump()))
    db.commit()
    logger.info("stored %s observation for zip %s", observation.weather_type, observation.zip_code)
    return Response(status_code=200)
