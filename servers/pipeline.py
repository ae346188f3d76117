"""Ordered request pipeline run before route dispatch.

Each stage is a callable taking an IncomingRequest; stages run in list order for every request
(matched or not) and never alter the response.
"""

import logging
from typing import Callable, Iterable, List, Optional

from src.core.logging_utils import format_request_line, get_access_logger

from servers.models import IncomingRequest

Stage = Callable[[IncomingRequest], None]


class RequestLogStage:
    """Write '<ISO-8601> - <METHOD> <URL>' for the request, once."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self._logger = logger or get_access_logger()

    def __call__(self, request: IncomingRequest) -> None:
        self._logger.info(format_request_line(request.received_at, request.method, request.url))


class RequestPipeline:
    """Fixed, ordered list of stages built once at startup."""

    def __init__(self, stages: Iterable[Stage]):
        self._stages: List[Stage] = list(stages)

    @property
    def stages(self) -> List[Stage]:
        return list(self._stages)

    def run(self, request: IncomingRequest) -> None:
        for stage in self._stages:
            stage(request)


def default_stages() -> List[Stage]:
    return [RequestLogStage()]
