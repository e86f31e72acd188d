"""Minimal state server for one simulated truck.

Serves:
- GET  /health    liveness probe
- GET  /state     latest state snapshot
- POST /update    merge a partial snapshot, stamp a new timestamp
- GET  /insights  alerts, tire health, fuel anomaly, advisory, indicators

The server is single-threaded. Before each request it runs whatever
simulation and advisory ticks have come due, so the session has exactly one
writer at a time.
"""

from __future__ import annotations

import json
import logging
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Optional, Tuple
from urllib.parse import urlparse

from truckmon.config.schema import SimulationConfig
from truckmon.simulation.session import TruckSession

logger = logging.getLogger(__name__)

SERVICE_NAME = "truckmon-state"


def _state_payload(session: TruckSession) -> dict:
    return session.state.to_dict()


def _content_length(header: Optional[str]) -> Optional[int]:
    """Body length from a Content-Length header, or None if it is malformed."""
    try:
        length = int(header or 0)
    except ValueError:
        return None
    return length if length >= 0 else None


def _apply_update(session: TruckSession, body: bytes) -> Tuple[HTTPStatus, dict]:
    """Merge a JSON body into the session state.

    Returns:
        (status, payload); malformed input gives 400 with an error message.
    """
    try:
        partial = json.loads(body.decode("utf-8") or "{}")
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return HTTPStatus.BAD_REQUEST, {"error": f"Invalid JSON: {exc}"}
    if not isinstance(partial, dict):
        return HTTPStatus.BAD_REQUEST, {"error": "Body must be a JSON object"}

    try:
        session.merge_snapshot(partial)
    except (TypeError, ValueError) as exc:
        return HTTPStatus.BAD_REQUEST, {"error": str(exc)}

    logger.info(f"Truck state updated: {partial}")
    return HTTPStatus.OK, {"message": "Updated successfully", "truckState": _state_payload(session)}


class StateServer(HTTPServer):
    """HTTPServer bound to one TruckSession."""

    def __init__(self, address, session: TruckSession):
        super().__init__(address, StateHandler)
        self.session = session


class StateHandler(BaseHTTPRequestHandler):
    """Serve the state API."""

    server: StateServer

    def _send_json(self, payload: dict, status: HTTPStatus = HTTPStatus.OK) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def _catch_up(self) -> TruckSession:
        session = self.server.session
        session.scheduler.run_pending()
        return session

    def log_message(self, format, *args) -> None:  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:  # noqa: N802
        route = urlparse(self.path).path
        session = self._catch_up()

        if route == "/health":
            self._send_json({"status": "ok", "service": SERVICE_NAME, "ticks": session.ticks})
            return

        if route == "/state":
            self._send_json(_state_payload(session))
            return

        if route == "/insights":
            self._send_json(session.insights())
            return

        self.send_error(HTTPStatus.NOT_FOUND, "Not found")

    def do_POST(self) -> None:  # noqa: N802
        route = urlparse(self.path).path
        session = self._catch_up()

        if route != "/update":
            self.send_error(HTTPStatus.NOT_FOUND, "Not found")
            return

        length = _content_length(self.headers.get("Content-Length"))
        if length is None:
            self._send_json({"error": "Invalid Content-Length header"}, HTTPStatus.BAD_REQUEST)
            return
        status, payload = _apply_update(session, self.rfile.read(length))
        self._send_json(payload, status)


def run_server(
    host: str = "127.0.0.1",
    port: int = 5000,
    config: Optional[SimulationConfig] = None,
) -> None:
    """Run the state server with a live session until interrupted."""
    session = TruckSession(config or SimulationConfig(profile="backend"))
    session.start()
    server = StateServer((host, port), session)

    print(f"Truck state server running at http://{host}:{port}")
    print("API: /health, /state, /update (POST), /insights")
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        session.stop()
        server.server_close()


if __name__ == "__main__":
    run_server()
