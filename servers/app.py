"""FastAPI app for GET/HEAD / and /health, with a request pipeline (logging) in front of every route.

run_server binds the listener itself so a busy port or bad address surfaces as BindError before uvicorn starts."""

import logging
import socket
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.config.settings import get_server_config, get_service_info
from src.core.clock import Clock, iso_timestamp, utc_now
from src.core.errors import BindError
from src.core.logging_utils import ensure_access_handler

from servers.models import IncomingRequest
from servers.pipeline import RequestPipeline, Stage, default_stages

logger = logging.getLogger(__name__)


def _request_target(request: Request) -> str:
    """Path plus query string as sent on the request line."""
    raw_path = request.scope.get("raw_path")
    path = raw_path.split(b"?", 1)[0].decode("latin-1") if raw_path else request.url.path
    query = request.url.query
    return f"{path}?{query}" if query else path


def create_app(
    stages: Optional[Iterable[Stage]] = None,
    clock: Optional[Clock] = None,
    config: Optional[dict] = None,
) -> FastAPI:
    """Build FastAPI app: pipeline stages (default: request log line) run before dispatch; GET/HEAD on / and /health only.

    Trailing-slash variants (/health/) are plain 404s, not redirects. If the process has not configured logging,
    the access logger gets its own stdout handler so request lines are not lost to the last-resort handler.
    """
    clock = clock or utc_now
    pipeline = RequestPipeline(default_stages() if stages is None else stages)
    info = get_service_info(config)
    ensure_access_handler()
    app = FastAPI(
        title="EkoSim Test API",
        description="Infrastructure connectivity and health check",
        redirect_slashes=False,
    )

    @app.middleware("http")
    async def run_pipeline(request: Request, call_next):
        pipeline.run(
            IncomingRequest(
                method=request.method,
                url=_request_target(request),
                path=request.url.path,
                received_at=clock(),
            )
        )
        return await call_next(request)

    @app.exception_handler(StarletteHTTPException)
    async def unregistered_method_is_not_found(request: Request, exc: StarletteHTTPException):
        """Only GET/HEAD are registered; a known path with another method gets the same 404 as an unknown path."""
        if exc.status_code == 405:
            return JSONResponse(status_code=404, content={"detail": "Not Found"})
        return await http_exception_handler(request, exc)

    @app.api_route("/", methods=["GET", "HEAD"])
    def get_root() -> Dict[str, Any]:
        """Connectivity check: fixed status/message plus response time."""
        return {
            "status": info["status"],
            "message": info["message"],
            "timestamp": iso_timestamp(clock()),
        }

    @app.api_route("/health", methods=["GET", "HEAD"])
    def get_health() -> Dict[str, Any]:
        return {"status": info["health_status"]}

    return app


def bind_socket(host: str, port: int) -> socket.socket:
    """Bind and listen on host:port. Raise BindError on any socket failure (in use, bad address, no permission)."""
    if not 0 <= port <= 65535:
        raise BindError(host, port, "port out of range")
    try:
        family, socktype, proto, _, sockaddr = socket.getaddrinfo(
            host, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
        )[0]
        sock = socket.socket(family, socktype, proto)
    except (OSError, OverflowError) as e:
        raise BindError(host, port, str(e)) from e
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(socket.SOMAXCONN)
    except (OSError, OverflowError) as e:
        sock.close()
        raise BindError(host, port, str(e)) from e
    return sock


def run_server(config: Optional[dict] = None) -> None:
    """Start the status server (host 0.0.0.0, port 3000 unless overridden). Blocks until the process is terminated."""
    import uvicorn

    server_cfg = get_server_config(config)
    host = server_cfg["host"]
    port = server_cfg["port"]

    sock = bind_socket(host, port)
    app = create_app(config=config)
    logger.info("Test API running on port %s", sock.getsockname()[1])
    server = uvicorn.Server(
        uvicorn.Config(app, host=host, port=port, log_level=server_cfg["log_level"], access_log=False)
    )
    server.run(sockets=[sock])
