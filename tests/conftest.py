import os

# Configuración de pruebas antes de importar la app
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ALLOWED_EMAILS"] = ""
os.environ["FINNHUB_API_KEY"] = ""
os.environ["SECRET_KEY"] = "test-secret"
os.environ["DEFAULT_BASE_CURRENCY"] = "EUR"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.database import engine
from app.main import app
from app.routes import fx
from app.utils import market_data


class FakeMarket:
    """Sustituye las llamadas HTTP de market_data por respuestas en memoria.

    `routes` asocia un fragmento de URL con un payload (o una excepción a lanzar).
    Sin ruta coincidente se comporta como un proveedor caído.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []

    def add(self, url_fragment, payload):
        self.routes[url_fragment] = payload

    async def get_json(self, url, params=None):
        self.calls.append((url, dict(params or {})))
        for fragment, payload in self.routes.items():
            if fragment in url:
                if isinstance(payload, Exception):
                    raise payload
                return payload(url, params) if callable(payload) else payload
        raise market_data.MarketDataError(f"offline: {url}")

    def calls_to(self, url_fragment):
        return [c for c in self.calls if url_fragment in c[0]]


@pytest.fixture(autouse=True)
def market(monkeypatch):
    fake = FakeMarket()
    monkeypatch.setattr(market_data, "_get_json", fake.get_json)
    return fake


@pytest.fixture(autouse=True)
def reset_state():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    market_data.crypto_cache.clear()
    fx.clear_cache()
    yield
    market_data.crypto_cache.clear()
    fx.clear_cache()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def register_and_login(client, email="ana@example.com", password="secreto123"):
    r = client.post("/auth/register", json={"email": email, "password": password})
    assert r.status_code == 200, r.text
    r = client.post("/auth/login", data={"username": email, "password": password})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client)
