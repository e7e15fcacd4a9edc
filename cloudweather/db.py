"""Helpers de SQLAlchemy compartidos por los servicios."""

import os
from typing import Callable, Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

POOL_SIZE = int(os.getenv("DB_POOL_SIZE", "5"))
MAX_OVERFLOW = int(os.getenv("DB_MAX_OVERFLOW", "10"))


def create_db_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        # una sola conexión compartida para que ":memory:" no se pierda entre sesiones
        return create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    return create_engine(
        url,
        pool_size=POOL_SIZE,
        max_overflow=MAX_OVERFLOW,
        pool_pre_ping=True,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False: el objeto guardado conserva sus valores (y la zona UTC) tras el commit
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def session_dependency(factory: sessionmaker) -> Callable[[], Generator[Session, None, None]]:
    """Construye la dependencia de FastAPI que abre y cierra una sesión por petición."""

    def get_db() -> Generator[Session, None, None]:
        db = factory()
        try:
            yield db
        finally:
            db.close()

    return get_db


def check_connection(factory: sessionmaker) -> bool:
    try:
        with factory() as db:
            db.execute(text("SELECT 1"))
        return True
    except SQLAlchemyError:
        return False
