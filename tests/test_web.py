"""Tests for the browser-based dashboard.

Tests use ``pytest.importorskip`` so they are skipped gracefully when
Flask is not installed.
"""

from __future__ import annotations

from typing import Any

import pytest

flask = pytest.importorskip("flask")

from devlin.config import SimulationConfig  # noqa: E402
from devlin.web.app import create_app  # noqa: E402

HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_CONFLICT = 409
CAPACITY = 5
RUN_TO_END = 10_000


def _create_client() -> Any:
    """Create a test client around a small, fast simulation."""
    config = SimulationConfig(
        capacity=CAPACITY,
        admission_probability=0.5,
        budget_range=(2, 5),
        budget_extra_range=(0, 2),
        io_probability=0.0,
        seed=1,
    )
    app = create_app(config)
    app.config["TESTING"] = True
    return app.test_client()


class TestAppCreation:
    """Verify the app factory and landing page."""

    def test_create_app_returns_flask(self) -> None:
        """create_app should return a Flask application."""
        assert isinstance(create_app(), flask.Flask)

    def test_index_before_first_tick(self) -> None:
        """GET / explains how to start."""
        response = _create_client().get("/")
        assert response.status_code == HTTP_OK
        assert b"No ticks yet" in response.data
        assert "text/plain" in response.content_type

    def test_index_shows_dashboard(self) -> None:
        """After a tick GET / shows the tick panel."""
        client = _create_client()
        client.post("/api/tick")
        assert b"=== Tick 0 ===" in client.get("/").data


class TestTickEndpoint:
    """Verify POST /api/tick."""

    def test_single_tick(self) -> None:
        """No body advances one tick."""
        data = _create_client().post("/api/tick").get_json()
        assert data["ticks"] == 1
        assert data["snapshot"]["tick"] == 0

    def test_many_ticks(self) -> None:
        """count advances several ticks."""
        data = _create_client().post("/api/tick", json={"count": 3}).get_json()
        assert data["ticks"] == 3  # noqa: PLR2004
        assert data["snapshot"]["tick"] == 2  # noqa: PLR2004

    def test_bad_count(self) -> None:
        """Non-positive counts are rejected."""
        response = _create_client().post("/api/tick", json={"count": 0})
        assert response.status_code == HTTP_BAD_REQUEST

    def test_run_to_completion(self) -> None:
        """Ticking stops at the end; further ticks conflict."""
        client = _create_client()
        data = client.post("/api/tick", json={"count": RUN_TO_END}).get_json()
        assert data["finished"] is True
        assert data["ticks"] < RUN_TO_END
        assert client.post("/api/tick").status_code == HTTP_CONFLICT
        assert b"Final Report" in client.get("/").data


class TestReadEndpoints:
    """Verify the read-only endpoints."""

    def test_snapshot_before_tick(self) -> None:
        """Snapshot is null before the first tick."""
        data = _create_client().get("/api/snapshot").get_json()
        assert data == {"finished": False, "snapshot": None}

    def test_snapshot_after_tick(self) -> None:
        """Snapshot mirrors the last tick."""
        client = _create_client()
        client.post("/api/tick", json={"count": 2})
        data = client.get("/api/snapshot").get_json()
        assert data["snapshot"]["tick"] == 1
        assert set(data["snapshot"]["counts"]) == {"ready", "running", "blocked", "deallocated"}

    def test_report(self) -> None:
        """The report is available at any time."""
        client = _create_client()
        client.post("/api/tick", json={"count": RUN_TO_END})
        data = client.get("/api/report").get_json()
        assert data["admitted"] == CAPACITY
        assert data["visited"]["deallocated"] == CAPACITY

    def test_log_filters(self) -> None:
        """The log can be filtered by level and source."""
        client = _create_client()
        client.post("/api/tick", json={"count": RUN_TO_END})
        everything = client.get("/api/log").get_json()
        info = client.get("/api/log?level=info").get_json()
        admissions = client.get("/api/log?source=admission").get_json()
        assert len(info) < len(everything)
        assert all(e["level"] != "DEBUG" for e in info)
        assert len(admissions) == CAPACITY
