"""EkoSim status server: GET / (connectivity), GET /health, request log line per request."""

from servers.app import bind_socket, create_app, run_server

__all__ = ["bind_socket", "create_app", "run_server"]
