"""Flask application factory for the Devlin web dashboard.

The ``create_app`` function builds a simulation and returns a Flask app
that exposes it over HTTP.  Ticks and reads share one lock, so a
request never sees a half-finished tick.
"""

from __future__ import annotations

import threading

from flask import Flask, Response, jsonify, request

from devlin.config import SimulationConfig
from devlin.dashboard import format_report, format_tick
from devlin.logging import LogLevel
from devlin.simulation import Simulation

_HTTP_BAD_REQUEST = 400
_HTTP_CONFLICT = 409
_MAX_TICKS_PER_REQUEST = 10_000
DEFAULT_WEB_CAPACITY = 20


def create_app(config: SimulationConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Settings for the simulation; defaults to a 20-process run.

    Returns:
        A configured Flask application ready to serve.

    """
    simulation = Simulation(config or SimulationConfig(capacity=DEFAULT_WEB_CAPACITY))
    lock = threading.Lock()

    app = Flask(__name__)

    @app.route("/")
    def index() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Render the latest dashboard as plain text."""
        with lock:
            snapshot = simulation.snapshot()
            if snapshot is None:
                body = "No ticks yet. POST /api/tick to start."
            elif simulation.finished:
                body = format_report(simulation.report())
            else:
                body = format_tick(snapshot, capacity=simulation.config.capacity)
        return Response(body, mimetype="text/plain")

    @app.route("/api/snapshot")
    def snapshot() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the latest snapshot, or null before the first tick."""
        with lock:
            current = simulation.snapshot()
            return jsonify(
                {
                    "finished": simulation.finished,
                    "snapshot": current.to_dict() if current is not None else None,
                }
            )

    @app.route("/api/tick", methods=["POST"])
    def tick() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Advance the simulation.

        Accepts an optional JSON body ``{"count": N}`` (default 1).

        Returns:
            JSON with ``ticks`` run, ``finished`` and the last ``snapshot``.

        """
        data = request.get_json(silent=True)
        count = data.get("count", 1) if isinstance(data, dict) else 1
        if not isinstance(count, int) or not 1 <= count <= _MAX_TICKS_PER_REQUEST:
            return jsonify({"error": "'count' must be a positive integer"}), _HTTP_BAD_REQUEST

        with lock:
            if simulation.finished:
                return jsonify({"error": "Simulation finished"}), _HTTP_CONFLICT
            ran = 0
            last = None
            while ran < count and not simulation.finished:
                last = simulation.tick()
                ran += 1
            assert last is not None  # noqa: S101
            return jsonify(
                {"ticks": ran, "finished": simulation.finished, "snapshot": last.to_dict()}
            )

    @app.route("/api/report")
    def report() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the metrics report so far."""
        with lock:
            return jsonify(simulation.report().to_dict())

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return log entries, optionally filtered by ``level`` and ``source``."""
        level_name = request.args.get("level")
        min_level = None
        if level_name is not None and level_name.upper() in LogLevel.__members__:
            min_level = LogLevel[level_name.upper()]
        with lock:
            entries = simulation.log.filter(min_level=min_level, source=request.args.get("source"))
        return jsonify(
            [
                {"tick": e.tick, "level": e.level.name, "source": e.source, "message": e.message}
                for e in entries
            ]
        )

    return app


def main() -> None:
    """Run the web dashboard development server.

    This is the ``devlin-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
