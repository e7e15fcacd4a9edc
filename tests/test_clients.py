from decimal import Decimal

import httpx
import pytest
from fastapi import HTTPException

from cloudweather.report import clients


class FakeResp:
    def __init__(self, status_code=200, json_data=None, text="", bad_json=False):
        self.status_code = status_code
        self._json = json_data
        self.text = text
        self._bad_json = bad_json

    def json(self, **kwargs):
        if self._bad_json:
            raise ValueError("not json")
        return self._json


def dummy_client(handler, seen=None):
    class DummyClient:
        def __init__(self, *a, **k): pass
        async def __aenter__(self): return self
        async def __aexit__(self, *a): pass
        async def get(self, url, params=None):
            if seen is not None:
                seen.append((url, params))
            return await handler(url, params)

    return DummyClient


def test_build_endpoint():
    url = clients.build_endpoint("https", "precip.local", "8443", "10001")
    assert url == "https://precip.local:8443/observation/10001"


def test_build_endpoint_escapa_zip():
    assert clients.build_endpoint("http", "h", "80", "AB 1/2").endswith("/observation/AB%201%2F2")


@pytest.mark.asyncio
async def test_fetch_precipitation_usa_config(monkeypatch):
    seen = []

    async def ok(url, params):
        return FakeResp(200, [
            {"zipCode": "10001", "weatherType": "rain", "amountInches": Decimal("1.25"),
             "createdOn": "2025-10-19T08:00:00Z"},
        ])

    monkeypatch.setattr(clients, "PRECIP_DATA_HOST", "precip")
    monkeypatch.setattr(clients, "PRECIP_DATA_PORT", "9000")
    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(ok, seen))

    rows = await clients.fetch_precipitation("10001", 7)
    assert seen == [("http://precip:9000/observation/10001", {"days": 7})]
    assert len(rows) == 1
    assert rows[0].amount_inches == Decimal("1.25")
    assert rows[0].observed_at.utcoffset().total_seconds() == 0


@pytest.mark.asyncio
async def test_fetch_temperature_campos_insensibles_a_mayusculas(monkeypatch):
    async def ok(url, params):
        return FakeResp(200, [
            {"ZIPCODE": "10001", "temphighf": 70, "TempLowF": Decimal("50.5"),
             "createdon": "2025-10-19T08:00:00+02:00", "id": "ignored"},
        ])

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(ok))

    rows = await clients.fetch_temperature("10001", 3)
    assert rows[0].temp_high_f == Decimal("70")
    assert rows[0].temp_low_f == Decimal("50.5")
    assert rows[0].observed_at.hour == 6


@pytest.mark.asyncio
async def test_body_null_es_lista_vacia(monkeypatch):
    async def ok(url, params):
        return FakeResp(200, None)

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(ok))
    assert await clients.fetch_precipitation("10001", 7) == []


@pytest.mark.asyncio
async def test_error_de_red_502(monkeypatch):
    calls = {"n": 0}

    async def fail(url, params):
        calls["n"] += 1
        raise httpx.ConnectError("refused")

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(fail))

    with pytest.raises(HTTPException) as ei:
        await clients.fetch_temperature("10001", 7)
    assert ei.value.status_code == 502
    assert calls["n"] == 1  # sin reintentos


@pytest.mark.asyncio
async def test_timeout_504(monkeypatch):
    async def slow(url, params):
        raise httpx.ReadTimeout("slow")

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(slow))

    with pytest.raises(HTTPException) as ei:
        await clients.fetch_precipitation("10001", 7)
    assert ei.value.status_code == 504


@pytest.mark.parametrize("status", [400, 404, 500, 503])
@pytest.mark.asyncio
async def test_status_no_2xx_502(monkeypatch, status):
    async def bad(url, params):
        return FakeResp(status, text="nope")

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(bad))

    with pytest.raises(HTTPException) as ei:
        await clients.fetch_precipitation("10001", 7)
    assert ei.value.status_code == 502


@pytest.mark.parametrize("payload", [
    {"items": []},
    ["not an object"],
    [{"zipCode": "10001", "weatherType": "rain"}],
    [{"zipCode": "10001", "weatherType": "rain", "amountInches": -1, "createdOn": "2025-10-19T08:00:00Z"}],
])
@pytest.mark.asyncio
async def test_payload_malformado_502(monkeypatch, payload):
    async def ok(url, params):
        return FakeResp(200, payload)

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(ok))

    with pytest.raises(HTTPException) as ei:
        await clients.fetch_precipitation("10001", 7)
    assert ei.value.status_code == 502


@pytest.mark.asyncio
async def test_json_invalido_502(monkeypatch):
    async def ok(url, params):
        return FakeResp(200, bad_json=True)

    monkeypatch.setattr(clients.httpx, "AsyncClient", dummy_client(ok))

    with pytest.raises(HTTPException) as ei:
        await clients.fetch_temperature("10001", 7)
    assert ei.value.status_code == 502
