from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient


def _access_records(caplog: pytest.LogCaptureFixture) -> list[logging.LogRecord]:
    return [r for r in caplog.records if r.name == "app.core.middleware"]


def test_preserves_incoming_request_id_header(client: TestClient) -> None:
    incoming_id = "test-request-id-123"
    resp = client.get("/health", headers={"X-Request-ID": incoming_id})

    assert resp.status_code == 200
    assert resp.headers.get("X-Request-ID") == incoming_id


def test_generates_request_id_when_missing(client: TestClient) -> None:
    resp = client.get("/health")

    assert resp.headers.get("X-Request-ID")
    assert resp.headers.get("X-Request-Duration-ms") is not None


def test_logs_one_line_per_request(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="app.core.middleware"):
        client.get("/api/books?page=1&limit=5")

    records = _access_records(caplog)
    assert len(records) == 1
    record = records[0]
    assert record.method == "GET"
    assert record.path == "/api/books?page=1&limit=5"
    assert record.status_code == 200
    assert record.duration_ms >= 0
    assert record.getMessage().startswith("[GET] /api/books?page=1&limit=5 -> 200 (")


def test_logs_error_statuses(client: TestClient, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.INFO, logger="app.core.middleware"):
        client.delete("/api/books/1")

    assert _access_records(caplog)[0].status_code == 401


def test_logs_500_when_handler_crashes(app, caplog: pytest.LogCaptureFixture) -> None:
    @app.get("/explode")
    async def explode():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.INFO, logger="app.core.middleware"):
        response = client.get("/explode")

    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong on the server."}
    assert _access_records(caplog)[0].status_code == 500


def test_500_keeps_request_id(app, caplog: pytest.LogCaptureFixture) -> None:
    @app.get("/explode-correlated")
    async def explode():
        raise RuntimeError("boom")

    client = TestClient(app, raise_server_exceptions=False)
    with caplog.at_level(logging.ERROR, logger="app.core.exception_handlers"):
        response = client.get("/explode-correlated", headers={"X-Request-ID": "rid-42"})

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "rid-42"
    records = [r for r in caplog.records if r.getMessage() == "unhandled_exception"]
    assert records[0].request_id == "rid-42"
