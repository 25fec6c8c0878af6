import pytest
from fastapi.testclient import TestClient

from namaz_timer.api import create_app
from namaz_timer.core.app import NamazTimerApp
from namaz_timer.core.errors import MalformedBaseTimesError, TimingSourceError

from tests.helpers import BASE, FakeProvider


@pytest.fixture
def client(app):
    app.provider = FakeProvider()
    return TestClient(create_app(app))


def test_schedule(client):
    response = client.get("/api/schedule", params={"date": "2024-03-20"})

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2024-03-20"
    assert body["source"] == "fake"
    assert body["latitude"] == 21.4225
    assert [e["key"] for e in body["entries"]][:3] == ["fajr", "sunrise", "ishraq"]
    assert body["entries"][0] == {
        "key": "fajr",
        "name": "Fajr",
        "description": "Dawn prayer",
        "time": "05:10",
        "start": "04:55",
        "end": "06:21",
        "ends_next_day": False,
    }
    assert body["entries"][3]["name"] == "Chasht (Duha)"
    assert body["entries"][9]["ends_next_day"] is True


def test_schedule_for_explicit_coordinate(client, app):
    response = client.get(
        "/api/schedule",
        params={"latitude": 31.5204, "longitude": 74.3587, "date": "2024-03-20"},
    )

    assert response.status_code == 200
    assert response.json()["longitude"] == 74.3587
    assert app.provider.calls[0][0] == (31.5204, 74.3587)


def test_next_with_clock_time(client):
    response = client.get("/api/schedule/next", params={"now": "23:59"})

    assert response.status_code == 200
    body = response.json()
    assert body["entry"]["key"] == "fajr"
    assert (body["hours"], body["minutes"], body["total_seconds"]) == (5, 11, 18660)
    assert body["remaining"] == "5h 11m remaining"


def test_next_with_iso_datetime(client, app):
    response = client.get("/api/schedule/next", params={"now": "2024-03-20T06:00:00"})

    assert response.status_code == 200
    assert response.json()["entry"]["key"] == "sunrise"
    assert response.json()["total_seconds"] == 1260
    assert str(app.provider.calls[0][1]) == "2024-03-20"


def test_next_rejects_unreadable_time(client):
    assert client.get("/api/schedule/next", params={"now": "teatime"}).status_code == 422


def test_current(client):
    response = client.get("/api/schedule/current", params={"now": "04:00"})

    assert response.status_code == 200
    body = response.json()
    assert body["current"]["key"] == "isha"
    assert [e["key"] for e in body["active"]] == ["isha", "tahajud"]


@pytest.mark.parametrize("params", [
    {"latitude": 21.4},
    {"latitude": 95, "longitude": 0},
    {"latitude": 0, "longitude": -200},
])
def test_bad_coordinates(client, params):
    assert client.get("/api/schedule", params=params).status_code == 422


def test_polar_location(app):
    client = TestClient(create_app(app))

    response = client.get(
        "/api/schedule",
        params={"latitude": 78.2232, "longitude": 15.6267, "date": "2024-06-21"},
    )

    assert response.status_code == 422
    assert "fajr" in response.json()["detail"]


@pytest.mark.parametrize("error", [TimingSourceError("upstream down"), MalformedBaseTimesError("Base times missing: asr")])
def test_source_failures(app, error):
    app.provider = FakeProvider(error=error)
    client = TestClient(create_app(app))

    response = client.get("/api/schedule", params={"date": "2024-03-20"})

    assert response.status_code == 502
    assert response.json()["detail"] == str(error)


def test_latest(client):
    assert client.get("/api/schedule/latest").status_code == 404

    client.get("/api/schedule", params={"date": "2024-03-21"})
    response = client.get("/api/schedule/latest")

    assert response.status_code == 200
    body = response.json()
    assert body["schedule_date"] == "2024-03-21"
    assert body["source"] == "fake"
    assert body["latitude"] == pytest.approx(21.4225, abs=0.01)
    assert body["data"]["entries"][0]["time"] == BASE["fajr"]


def test_latest_without_storage(app_config):
    app_config.data["database"]["enabled"] = False
    client = TestClient(create_app(NamazTimerApp(config=app_config)))

    assert client.get("/api/schedule/latest").status_code == 404
