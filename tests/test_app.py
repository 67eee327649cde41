import json
import sqlite3
from unittest.mock import patch

import pytest
from flask import Flask

from workhours.app import create_app, main
from workhours.db import Database


@pytest.fixture
def database():
    db = Database(":memory:")
    yield db
    db.close()


@pytest.fixture
def client(database):
    return create_app(database).test_client()


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "OK"


def test_add_holiday(client):
    holidays = [{"date": "2023-12-25T00:00:00Z", "description": "Christmas"}]
    resp = client.post("/holidays/us", json=holidays)
    assert resp.status_code == 200
    assert resp.get_json() == "1 holidays added successfully"

    resp = client.get("/holidays/us")
    assert resp.status_code == 200
    listed = resp.get_json()
    assert len(listed) == 1
    assert listed[0]["date"] == "2023-12-25T00:00:00Z"
    assert listed[0]["description"] == "Christmas"
    assert listed[0]["country"] == "us"


def test_list_holidays(client):
    holidays = [{"date": "2023-01-01T00:00:00Z", "description": "New Year's Day"}]
    client.post("/holidays/fr", json=holidays)

    resp = client.get("/holidays/fr")
    assert resp.status_code == 200
    listed = resp.get_json()
    assert len(listed) == 1
    assert listed[0]["date"] == "2023-01-01T00:00:00Z"
    assert listed[0]["description"] == "New Year's Day"
    assert listed[0]["country"] == "fr"

    resp = client.get("/holidays/de")
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_country_is_lowercased(client, database):
    client.post("/holidays/US", json=[{"date": "2023-07-04T00:00:00Z"}])
    stored = database.get_holidays_by_country("us")
    assert [h.country for h in stored] == ["us"]
    assert stored[0].description == ""
    assert len(client.get("/holidays/Us").get_json()) == 1


def test_add_holiday_rejects_non_array(client):
    resp = client.post("/holidays/us", json={"date": "2023-07-04T00:00:00Z"})
    assert resp.status_code == 400


def test_add_holiday_rejects_missing_date(client, database):
    resp = client.post("/holidays/us", json=[{"description": "No date"}])
    assert resp.status_code == 400
    assert database.get_all_holidays() == []


def test_get_work_hours_with_end_date(client):
    resp = client.get(
        "/?startDate=2023-10-02T09:00:00Z&endDate=2023-10-06T17:00:00Z&country=us&timezone=UTC"
    )
    assert resp.status_code == 200
    assert resp.get_json()["work_hours"] == 40.0


def test_get_work_hours_with_duration(client):
    resp = client.get(
        "/?startDate=2023-10-02T09:00:00Z&durationSeconds=432000&country=us&timezone=UTC"
    )
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["work_hours"] == 40.0
    assert body["work_minutes"] == 2400.0
    assert body["work_seconds"] == 144000.0


def test_get_work_hours_with_holiday(client):
    client.post(
        "/holidays/us",
        json=[{"date": "2023-10-04T00:00:00Z", "description": "Test Holiday"}],
    )
    resp = client.get(
        "/?startDate=2023-10-02T09:00:00Z&endDate=2023-10-06T17:00:00Z&country=us&timezone=UTC"
    )
    assert resp.status_code == 200
    assert resp.get_json()["work_hours"] == 32.0


def test_get_work_hours_invalid_date(client):
    resp = client.get(
        "/?startDate=invalid-date&endDate=2023-10-06T17:00:00Z&country=us&timezone=UTC"
    )
    assert resp.status_code == 400


def test_get_work_hours_invalid_timezone(client):
    resp = client.get(
        "/?startDate=2023-10-02T09:00:00Z&endDate=2023-10-06T17:00:00Z"
        "&country=us&timezone=Invalid/Timezone"
    )
    assert resp.status_code == 400


def test_get_work_hours_requires_end_or_duration(client):
    resp = client.get("/?startDate=2023-10-02T09:00:00Z&country=us&timezone=UTC")
    assert resp.status_code == 400
    assert resp.get_json() == "Either endDate or durationSeconds must be provided"


def test_get_work_hours_start_after_end(client):
    resp = client.get(
        "/?startDate=2023-10-03T09:00:00Z&endDate=2023-10-02T09:00:00Z&country=us&timezone=UTC"
    )
    assert resp.status_code == 400
    assert "Start date must be strictly before end date" in resp.get_data(as_text=True)


def test_get_work_hours_custom_day(client):
    resp = client.get(
        "/?startDate=2023-10-02T10:00:00Z&endDate=2023-10-02T16:00:00Z"
        "&startOfDay=08:00:00&endOfDay=16:00:00&country=us&timezone=UTC"
    )
    assert resp.status_code == 200
    assert resp.get_json()["work_hours"] == 6.0


def test_schema_route(client):
    resp = client.get("/schema")
    assert resp.status_code == 200
    assert resp.content_type == "application/json"
    spec = json.loads(resp.get_data(as_text=True))
    assert spec["openapi"] == "3.0.0"
    assert "/holidays/{country}" in spec["paths"]


def test_swagger_missing_file(client, tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    resp = client.get("/swagger")
    assert resp.status_code == 500
    assert "swagger-ui.html" in resp.get_data(as_text=True)


def test_swagger_serves_file(client, tmp_path, monkeypatch):
    (tmp_path / "swagger-ui.html").write_text("<html>docs</html>", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    resp = client.get("/swagger")
    assert resp.status_code == 200
    assert resp.get_data(as_text=True) == "<html>docs</html>"
    assert resp.content_type.startswith("text/html")


def test_main_starts_server(tmp_path, monkeypatch, capsys):
    db_path = tmp_path / "hours.db"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_LOCATION", str(db_path))
    monkeypatch.setenv("PORT", "9123")
    with patch.object(Flask, "run") as run:
        assert main([]) == 0
    run.assert_called_once_with(host="0.0.0.0", port=9123)
    assert "Starting server at 0.0.0.0:9123" in capsys.readouterr().out
    with sqlite3.connect(db_path) as conn:
        tables = conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='holidays'"
        ).fetchall()
    assert tables == [("holidays",)]


def test_main_rejects_bad_port(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_LOCATION", str(tmp_path / "hours.db"))
    monkeypatch.setenv("PORT", "not-a-port")
    with patch.object(Flask, "run") as run, pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert run.call_count == 0