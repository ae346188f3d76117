"""IncomingRequest: transient per-request record handed to pipeline stages."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class IncomingRequest:
    """Method, target and arrival instant of one HTTP request. Lives for a single request."""

    method: str
    url: str  # path plus ?query when present, as the client sent it
    path: str
    received_at: datetime
