"""Flask application factory for the simulator's JSON API.

The ``create_app`` function creates a simulator session and a shell,
and returns a Flask app with four endpoints:

- ``GET /api/algorithms`` — list the catalog.
- ``POST /api/plan`` — stateless planning from a JSON body.
- ``POST /api/execute`` — execute a shell command and return JSON.
- ``GET /api/status`` — return the session's playback snapshot.

Playback time only moves when a client asks it to (``tick`` and
``step`` commands), so the server never runs a background timer.
"""

from __future__ import annotations

from typing import Any

from flask import Flask, Response, jsonify, request

from disk_sim.catalog import all_algorithms
from disk_sim.config import ConfigError, SimulationConfig
from disk_sim.planner import Algorithm, Direction, compute_sequence
from disk_sim.request_queue import RequestError, RequestQueue
from disk_sim.shell import Shell
from disk_sim.simulator import Simulator

_HTTP_BAD_REQUEST = 400


def _plan_from_body(data: dict[str, Any], defaults: SimulationConfig) -> dict[str, object]:
    """Validate a planning request body and return the plan as a dict.

    Raises:
        ConfigError: If a parameter has the wrong type or is out of range.
        RequestError: If a request is invalid or duplicated.

    """
    try:
        changes = {
            "max_track": int(data.get("max_track", defaults.max_track)),
            "initial_position": int(data.get("initial_position", defaults.initial_position)),
            "direction": Direction(str(data.get("direction", defaults.direction)).lower()),
            "algorithm": Algorithm(str(data.get("algorithm", defaults.algorithm)).lower()),
        }
    except (TypeError, ValueError) as e:
        msg = f"invalid parameter: {e}"
        raise ConfigError(msg) from None
    config = defaults.replace(**changes)

    raw_requests = data.get("requests", [])
    if not isinstance(raw_requests, list):
        msg = "'requests' must be a list of tracks"
        raise RequestError(msg)
    queue = RequestQueue(max_track=config.max_track)
    queue.extend(raw_requests)

    plan = compute_sequence(
        config.initial_position,
        config.max_track,
        config.direction,
        queue.pending,
        config.algorithm,
    )
    return plan.as_dict()


def create_app(config: SimulationConfig | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Session defaults; read from the environment if omitted.

    Returns:
        A configured Flask application ready to serve.

    """
    defaults = config if config is not None else SimulationConfig.from_env()
    simulator = Simulator(defaults)
    shell = Shell(simulator=simulator)

    app = Flask(__name__)

    @app.route("/api/algorithms")
    def algorithms() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the catalog of algorithms."""
        return jsonify([info.as_dict() for info in all_algorithms()])

    @app.route("/api/plan", methods=["POST"])
    def plan() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Compute a sequence without touching the session.

        Expects JSON body with optional ``initial_position``,
        ``max_track``, ``direction``, ``algorithm`` and ``requests``.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify({"error": "Expected a JSON object"}), _HTTP_BAD_REQUEST
        try:
            return jsonify(_plan_from_body(data, defaults))
        except (ConfigError, RequestError) as e:
            return jsonify({"error": str(e)}), _HTTP_BAD_REQUEST

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Execute a shell command against the session.

        Expects JSON body: ``{"command": "..."}``

        Returns:
            JSON with ``output`` and ``snapshot`` fields.

        """
        data = request.get_json(silent=True)
        if not isinstance(data, dict) or "command" not in data:
            return jsonify({"error": "Missing 'command' field"}), _HTTP_BAD_REQUEST

        command = data["command"]
        if not isinstance(command, str):
            return jsonify({"error": "'command' must be a string"}), _HTTP_BAD_REQUEST
        output = shell.execute(command)
        if output == Shell.EXIT_SENTINEL:
            output = "Session closed."
        return jsonify({"output": output, "snapshot": simulator.snapshot().as_dict()})

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the session parameters and playback snapshot."""
        return jsonify(
            {
                "algorithm": str(simulator.algorithm),
                "direction": str(simulator.direction),
                "initial_position": simulator.initial_position,
                "max_track": simulator.max_track,
                "tick_interval_ms": simulator.controller.tick_interval_ms,
                "requests": simulator.requests,
                "snapshot": simulator.snapshot().as_dict(),
            }
        )

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``disk-sim-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
