"""Startup errors for the status server."""


class BindError(Exception):
    """Listener could not be bound (port in use, permission denied, bad address). Fatal; never retried."""

    def __init__(self, host: str, port: int, reason: str):
        self.host = host
        self.port = port
        self.reason = reason
        super().__init__(f"cannot bind {host}:{port}: {reason}")
