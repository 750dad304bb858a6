"""
End-to-end tests of the HTTP API with a fake Nature Remo and an in-memory database
"""
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from remo_monitor import database
from remo_monitor.database import get_db
from remo_monitor.models import Base
from remo_monitor.models.sensor_data import SensorData
from remo_monitor.providers.nature_remo_provider import get_nature_remo_provider

from conftest import living_room_device


def count_rows(session_factory):
    session = session_factory()
    try:
        return session.query(SensorData).count()
    finally:
        session.close()


def test_save_then_query_round_trip(client):
    response = client.post("/api/save-sensor-data")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Successfully saved data for 1 device(s)"}

    response = client.get("/api/get-sensor-data", params={"device_id": "dev1", "hours": 1})
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    row = rows[0]
    assert row["device_id"] == "dev1"
    assert row["device_name"] == "Living Room"
    assert row["temperature"] == 23.5
    assert row["humidity"] == 45
    assert row["illuminance"] is None
    assert row["movement"] is None
    assert row["created_at"]


def test_save_twice_duplicates_rows(client, session_factory, fake_remo):
    fake_remo.devices = [living_room_device(), living_room_device(id="dev2", name="Bedroom")]

    client.post("/api/save-sensor-data")
    client.post("/api/save-sensor-data")

    assert count_rows(session_factory) == 4


def test_save_with_no_devices_returns_404(client, session_factory, fake_remo):
    fake_remo.devices = []

    response = client.post("/api/save-sensor-data")

    assert response.status_code == 404
    assert response.json() == {"message": "No devices found"}
    assert count_rows(session_factory) == 0


def test_save_rejects_get(client, fake_remo):
    response = client.get("/api/save-sensor-data")

    assert response.status_code == 405
    assert response.json() == {"message": "Method not allowed"}
    assert fake_remo.requests == []


def test_get_sensor_data_rejects_post_without_store_access(app, client):
    store_calls = []

    def tracking_get_db():
        store_calls.append(True)
        yield None

    app.dependency_overrides[get_db] = tracking_get_db

    response = client.post("/api/get-sensor-data")

    assert response.status_code == 405
    assert response.json() == {"message": "Method not allowed"}
    assert store_calls == []


def test_get_sensor_data_empty_is_success(client):
    response = client.get("/api/get-sensor-data")

    assert response.status_code == 200
    assert response.json() == []


def test_get_sensor_data_validates_limit(client):
    response = client.get("/api/get-sensor-data", params={"limit": "abc"})

    assert response.status_code == 422
    assert "limit" in response.json()["message"]


def test_missing_token_returns_500_message(app, client, fake_remo):
    app.dependency_overrides[get_nature_remo_provider] = lambda: fake_remo.provider(None)

    for method, path in [("get", "/api/devices"), ("get", "/api/temperature"), ("post", "/api/save-sensor-data")]:
        response = getattr(client, method)(path)
        assert response.status_code == 500
        assert "NATURE_REMO_ACCESS_TOKEN" in response.json()["message"]

    assert fake_remo.requests == []


def test_upstream_failure_returns_500_message(client, session_factory, fake_remo):
    fake_remo.status_code = 500
    fake_remo.text = "internal error"

    response = client.post("/api/save-sensor-data")

    assert response.status_code == 500
    assert "500" in response.json()["message"]
    assert "internal error" in response.json()["message"]
    assert count_rows(session_factory) == 0


def test_devices_strips_extra_fields(client, fake_remo):
    fake_remo.devices = [living_room_device(users=[{"id": "u1"}], humidity_offset=0, temperature_offset=0)]

    response = client.get("/api/devices")

    assert response.status_code == 200
    device = response.json()[0]
    assert set(device) == {"id", "name", "serial_number", "mac_address", "firmware_version", "newest_events"}
    assert device["newest_events"]["te"]["val"] == 23.5
    assert "il" not in device["newest_events"]


def test_devices_with_no_devices_returns_404(client, fake_remo):
    fake_remo.devices = []

    response = client.get("/api/devices")

    assert response.status_code == 404
    assert "No devices found" in response.json()["message"]


def test_temperature_returns_raw_upstream_payload(client, fake_remo):
    raw = living_room_device(users=[{"id": "u1"}], humidity_offset=0)
    fake_remo.devices = [raw]

    response = client.get("/api/temperature")

    assert response.status_code == 200
    assert response.json() == [raw]


def test_device_list_is_not_served_from_store(client, fake_remo):
    client.post("/api/save-sensor-data")
    fake_remo.devices = [living_room_device(name="Lounge")]

    devices = client.get("/api/devices").json()
    rows = client.get("/api/get-sensor-data").json()

    assert devices[0]["name"] == "Lounge"
    assert rows[0]["device_name"] == "Living Room"


def test_sensor_summary(client, fake_remo):
    fake_remo.devices = [living_room_device(), living_room_device(id="dev2", name="Bedroom", newest_events={})]
    client.post("/api/save-sensor-data")

    response = client.get("/api/sensor-summary")

    assert response.status_code == 200
    summaries = {s["id"]: s for s in response.json()}
    assert summaries["dev1"]["newest_events"]["te"]["val"] == 23.5
    assert summaries["dev2"]["newest_events"] == {}


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok", "service": "remo-monitor-api"}


def test_timestamps_carry_utc_offset(client):
    client.post("/api/save-sensor-data")

    row = client.get("/api/get-sensor-data").json()[0]
    summary = client.get("/api/sensor-summary").json()[0]

    assert row["created_at"].endswith(("Z", "+00:00"))
    assert summary["newest_events"]["te"]["created_at"].endswith(("Z", "+00:00"))


def test_save_store_failure_returns_500_and_writes_nothing(client, session_factory, monkeypatch):
    def failing_commit(self):
        raise OperationalError("INSERT INTO sensor_data", {}, Exception("disk I/O error"))

    monkeypatch.setattr(Session, "commit", failing_commit)

    response = client.post("/api/save-sensor-data")

    monkeypatch.undo()
    assert response.status_code == 500
    assert response.json() == {"message": "Failed to save data to the database: disk I/O error"}
    assert count_rows(session_factory) == 0


def test_store_failure_on_read_and_write_returns_500(client, session_factory):
    Base.metadata.drop_all(bind=session_factory.kw["bind"])

    for response in (client.get("/api/get-sensor-data"), client.post("/api/save-sensor-data")):
        assert response.status_code == 500
        message = response.json()["message"]
        assert "no such table" in message
        assert "SELECT" not in message
        assert "INSERT" not in message


def test_missing_database_url_returns_500(app, client, monkeypatch):
    app.dependency_overrides.pop(get_db)
    monkeypatch.setattr(database.settings, "database_url", "")
    monkeypatch.setattr(database, "_engine", None)

    response = client.get("/api/get-sensor-data")

    assert response.status_code == 500
    assert "DATABASE_URL" in response.json()["message"]
