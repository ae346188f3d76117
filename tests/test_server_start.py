"""Listener startup: bind_socket / run_server. Bind failure is a BindError, never retried."""

import logging
import socket

import pytest

from servers import app as app_module
from servers.app import bind_socket, run_server
from src.core.errors import BindError


@pytest.fixture
def busy_port():
    """A port with a listening socket on 127.0.0.1."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
    sock.bind(("127.0.0.1", 0))
    sock.listen(1)
    yield sock.getsockname()[1]
    sock.close()


class TestBindSocket:
    def test_binds_ephemeral_port(self):
        sock = bind_socket("127.0.0.1", 0)
        try:
            host, port = sock.getsockname()[:2]
            assert host == "127.0.0.1"
            assert port > 0
        finally:
            sock.close()

    def test_port_in_use(self, busy_port):
        with pytest.raises(BindError) as exc_info:
            bind_socket("127.0.0.1", busy_port)
        assert exc_info.value.port == busy_port
        assert exc_info.value.host == "127.0.0.1"
        assert str(busy_port) in str(exc_info.value)

    def test_invalid_address(self):
        with pytest.raises(BindError):
            bind_socket("256.256.256.256", 0)

    def test_port_out_of_range(self):
        with pytest.raises(BindError):
            bind_socket("127.0.0.1", 70000)


class TestRunServer:
    def test_bind_failure_raises_before_serving(self, busy_port, monkeypatch):
        import uvicorn

        called = []
        monkeypatch.setattr(uvicorn.Server, "run", lambda self, sockets=None: called.append(sockets))
        with pytest.raises(BindError):
            run_server({"server": {"host": "127.0.0.1", "port": busy_port}})
        assert called == []

    def test_serves_on_bound_socket(self, monkeypatch, caplog):
        import uvicorn

        captured = {}

        def fake_run(self, sockets=None):
            captured["sockets"] = sockets
            captured["config"] = self.config

        monkeypatch.setattr(uvicorn.Server, "run", fake_run)
        with caplog.at_level(logging.INFO, logger=app_module.__name__):
            run_server({"server": {"host": "127.0.0.1", "port": 0}})
        try:
            (sock,) = captured["sockets"]
            port = sock.getsockname()[1]
            assert port > 0
            assert captured["config"].access_log is False
            assert f"Test API running on port {port}" in caplog.text
        finally:
            for s in captured.get("sockets") or []:
                s.close()
