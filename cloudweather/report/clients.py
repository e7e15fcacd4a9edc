import logging
import os
from decimal import Decimal
from typing import Any, Type, TypeVar
from urllib.parse import quote

import httpx
from fastapi import HTTPException
from pydantic import BaseModel, ValidationError

from ..observations import PrecipitationObservation, TemperatureObservation

logger = logging.getLogger(__name__)

PRECIP_DATA_PROTOCOL = os.getenv("PRECIP_DATA_PROTOCOL", "http")
PRECIP_DATA_HOST = os.getenv("PRECIP_DATA_HOST", "localhost")
PRECIP_DATA_PORT = os.getenv("PRECIP_DATA_PORT", "8001")

TEMP_DATA_PROTOCOL = os.getenv("TEMP_DATA_PROTOCOL", "http")
TEMP_DATA_HOST = os.getenv("TEMP_DATA_HOST", "localhost")
TEMP_DATA_PORT = os.getenv("TEMP_DATA_PORT", "8002")

PER_REQ_TIMEOUT = float(os.getenv("PER_REQ_TIMEOUT", "5"))

M = TypeVar("M", bound=BaseModel)


def build_endpoint(protocol: str, host: str, port: str, zip_code: str) -> str:
    return f"{protocol}://{host}:{port}/observation/{quote(zip_code, safe='')}"


def _match_fields(model: Type[BaseModel], row: dict) -> dict:
    # nombres de campo insensibles a mayúsculas: "ZIPCODE" / "zipcode" -> "zipCode"
    aliases = {}
    for name, field in model.model_fields.items():
        alias = field.alias or name
        aliases[alias.lower()] = alias
    return {aliases.get(str(k).lower(), k): v for k, v in row.items()}


def decode_observations(model: Type[M], payload: Any, source: str) -> list[M]:
    """
    Política única para ambos proveedores:
    - null -> lista vacía
    - lista de objetos válidos -> modelos
    - cualquier otra forma -> 502 (no se degrada a vacío)
    """
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise HTTPException(status_code=502, detail=f"{source}: expected a JSON array")
    try:
        out = []
        for row in payload:
            if not isinstance(row, dict):
                raise HTTPException(status_code=502, detail=f"{source}: expected JSON objects")
            out.append(model.model_validate(_match_fields(model, row)))
        return out
    except ValidationError as e:
        raise HTTPException(status_code=502, detail=f"{source}: invalid observation ({e.error_count()} errors)")


async def _fetch(url: str, days: int, source: str) -> Any:
    """
    - 2xx -> JSON (números como Decimal)
    - timeout -> 504
    - error de red / no 2xx -> 502
    Sin reintentos: el fallo se propaga tal cual al agregador.
    """
    try:
        async with httpx.AsyncClient(timeout=PER_REQ_TIMEOUT) as client:
            r = await client.get(url, params={"days": days})
    except httpx.TimeoutException as e:
        logger.warning("%s timed out: %s", source, e)
        raise HTTPException(status_code=504, detail=f"{source} timed out")
    except httpx.RequestError as e:
        logger.warning("%s unreachable: %s", source, e)
        raise HTTPException(status_code=502, detail=f"{source} unavailable: {e}")

    if not 200 <= r.status_code < 300:
        logger.warning("%s answered %s", source, r.status_code)
        raise HTTPException(status_code=502, detail=f"{source} error {r.status_code}: {r.text}")

    try:
        return r.json(parse_float=Decimal)
    except ValueError:
        raise HTTPException(status_code=502, detail=f"{source}: response is not valid JSON")


async def fetch_precipitation(zip_code: str, days: int) -> list[PrecipitationObservation]:
    url = build_endpoint(PRECIP_DATA_PROTOCOL, PRECIP_DATA_HOST, PRECIP_DATA_PORT, zip_code)
    payload = await _fetch(url, days, "precipitation service")
    return decode_observations(PrecipitationObservation, payload, "precipitation service")


async def fetch_temperature(zip_code: str, days: int) -> list[TemperatureObservation]:
    url = build_endpoint(TEMP_DATA_PROTOCOL, TEMP_DATA_HOST, TEMP_DATA_PORT, zip_code)
    payload = await _fetch(url, days, "temperature service")
    return decode_observations(TemperatureObservation, payload, "temperature service")
