import os
import sys

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

backend_dir = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, backend_dir)

from remo_monitor.database import get_db
from remo_monitor.main import create_app
from remo_monitor.models import Base
from remo_monitor.providers.nature_remo_provider import NatureRemoProvider, get_nature_remo_provider

API_ENDPOINT = "https://api.nature.test/1"


def living_room_device(**overrides):
    device = {
        "id": "dev1",
        "name": "Living Room",
        "serial_number": "1W320010000001",
        "mac_address": "aa:bb:cc:dd:ee:01",
        "firmware_version": "Remo/1.0.77-g808448c",
        "newest_events": {
            "te": {"val": 23.5, "created_at": "2024-01-01T00:00:00Z"},
            "hu": {"val": 45, "created_at": "2024-01-01T00:00:00Z"},
        },
    }
    device.update(overrides)
    return device


class FakeNatureRemo:
    """Answers GET /devices with a configurable status and body"""

    def __init__(self):
        self.devices = [living_room_device()]
        self.status_code = 200
        self.text = None
        self.requests = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        return httpx.Response(self.status_code, json=self.devices)

    def provider(self, access_token="test-token"):
        return NatureRemoProvider(access_token, API_ENDPOINT, transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_remo():
    return FakeNatureRemo()


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def app(session_factory, fake_remo):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_nature_remo_provider] = lambda: fake_remo.provider()
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
