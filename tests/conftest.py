"""Fixtures comunes: bases SQLite en memoria y clientes de prueba."""

import os

# antes de importar los servicios: nada de PostgreSQL en los tests
os.environ.setdefault("REPORT_DATABASE_URL", "sqlite://")
os.environ.setdefault("PRECIPITATION_DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cloudweather.precipitation import database as precip_database
from cloudweather.precipitation.main import app as precip_app
from cloudweather.report import database as report_database
from cloudweather.report.main import app as report_app


def _memory_session(base):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
    )
    return engine, TestingSessionLocal()


@pytest.fixture
def report_db():
    engine, db = _memory_session(report_database.Base)
    yield db
    db.close()
    report_database.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def precip_db():
    engine, db = _memory_session(precip_database.Base)
    yield db
    db.close()
    precip_database.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def report_client(report_db):
    def override_get_db():
        yield report_db

    report_app.dependency_overrides[report_database.get_db] = override_get_db
    with TestClient(report_app) as client:
        yield client
    report_app.dependency_overrides.clear()


@pytest.fixture
def precip_client(precip_db):
    def override_get_db():
        yield precip_db

    precip_app.dependency_overrides[precip_database.get_db] = override_get_db
    with TestClient(precip_app) as client:
        yield client
    precip_app.dependency_overrides.clear()
