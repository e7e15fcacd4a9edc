import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# --- CORS ---
ALLOW_ORIGINS = os.getenv("ALLOW_ORIGINS", "*")
ALLOW_METHODS = os.getenv("ALLOW_METHODS", "*")
ALLOW_HEADERS = os.getenv("ALLOW_HEADERS", "*")
ALLOW_CREDENTIALS = os.getenv("ALLOW_CREDENTIALS", "false").lower() == "true"
CORS_MAX_AGE = int(os.getenv("CORS_MAX_AGE", "600"))


def configure_logging() -> None:
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _split(value: str) -> list[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def add_cors(app: FastAPI) -> None:
    origins = _split(ALLOW_ORIGINS)
    methods = _split(ALLOW_METHODS)
    headers = _split(ALLOW_HEADERS)

    # "*" no es compatible con credenciales; en ese caso hay que listar los orígenes
    allow_origins_cfg = ["*"] if (origins == ["*"] and not ALLOW_CREDENTIALS) else origins or ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins_cfg,
        allow_credentials=ALLOW_CREDENTIALS,
        allow_methods=methods or ["GET", "POST", "OPTIONS"],
        allow_headers=headers or ["*"],
        max_age=CORS_MAX_AGE,
    )
