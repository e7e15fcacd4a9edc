import asyncio
import logging
from datetime import datetime, timezone

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..window import window_start
from .aggregations import in_window, summarize
from .clients import fetch_precipitation, fetch_temperature
from .models import WeatherReport, WeatherReportRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _fetch_both(zip_code: str, days: int) -> list:
    tasks = [
        asyncio.create_task(fetch_precipitation(zip_code, days)),
        asyncio.create_task(fetch_temperature(zip_code, days)),
    ]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        # si uno falla (o nos cancelan), el otro no sigue vivo en segundo plano
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def build_weekly_report(zip_code: str, days: int, db: Session) -> WeatherReport:
    """
    Construye y guarda un informe para `zip_code` con las observaciones de los
    últimos `days` días.

    Contrato: el llamador ya validó `zip_code` no vacío y `days` en [1, 30];
    aquí no se vuelve a comprobar.

    Cada llamada correcta inserta un informe nuevo (no es idempotente). Si falla
    cualquiera de los dos proveedores o el guardado, no se devuelve ni se
    persiste nada.
    """
    start = window_start(days, _utcnow())

    # 1) Ambos proveedores en paralelo; el primer fallo aborta el informe
    precip_data, temp_data = await _fetch_both(zip_code, days)
    precip_data = in_window(precip_data, start)
    temp_data = in_window(temp_data, start)

    # 2) Reducción
    summary = summarize(precip_data, temp_data)
    logger.info(
        "zip: %s over last %s days: total snow: %s, rain: %s",
        zip_code, days, summary["snow_total_inches"], summary["rain_fall_total_inches"],
    )
    logger.info(
        "zip: %s over last %s days: low temp: %s, high temp: %s",
        zip_code, days, summary["average_low_f"], summary["average_high_f"],
    )

    # 3) Guardado; si no queda registrado, el informe no se devuelve
    record = WeatherReportRecord(zip_code=zip_code, created_on=_utcnow(), **summary)
    try:
        db.add(record)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error("could not store report for zip %s: %s", zip_code, e)
        raise HTTPException(status_code=503, detail="Report store unavailable")

    return WeatherReport.model_validate(record)
