"""Starlette middleware reporting request errors to Sentry."""

import logging
from typing import Sequence

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from .config import DEFAULT_RESERVED_MEMORY_SIZE
from .events import EventBridge
from .hooks import report_unhandled
from .runtime import MemoryReserve


class ErrorTrackingMiddleware(BaseHTTPMiddleware):
    """Reports unhandled exceptions and runs end-of-request handling.

    A memory reserve is held while the request is processed and released
    before fatal errors are inspected. Attached log handlers are flushed
    before the client sends its deferred events. Both run in the thread pool
    since sending may block on the transport.
    """

    def __init__(
        self,
        app: ASGIApp,
        bridge: EventBridge,
        log_handlers: Sequence[logging.Handler] = (),
        reserved_memory_size: int = DEFAULT_RESERVED_MEMORY_SIZE,
    ):
        super().__init__(app)
        self.bridge = bridge
        self.log_handlers = log_handlers
        self.reserved_memory_size = reserved_memory_size

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        reserve = MemoryReserve(self.reserved_memory_size)
        reserve.reserve()

        try:
            return await call_next(request)
        except Exception as exc:
            report_unhandled(self.bridge, self.bridge.context, exc)
            raise
        finally:
            await run_in_threadpool(self._finish_request, reserve)

    def _finish_request(self, reserve: MemoryReserve) -> None:
        try:
            for handler in self.log_handlers:
                handler.flush()
        finally:
            self.bridge.handle_end_of_request(reserve)
