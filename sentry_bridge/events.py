"""
Event Bridge

Forwards request lifecycle events to the default error tracking client.
"""

import logging
from typing import Optional

from .config import DEFAULT_CLIENT_KEY
from .runtime import MemoryReserve, RuntimeContext
from .sentry.registry import ClientProvider
from .types import ErrorRecord, ReportedError

logger = logging.getLogger(__name__)


class EventBridge:
    """
    Receives exception, error and end-of-request events and reports them.

    Errors raised by the client are not caught here; they propagate to the
    host's own error handling.

    Usage:
        bridge = EventBridge(registry, context)
        bridge.handle_exception(exc)
        bridge.handle_end_of_request(reserve)
    """

    def __init__(
        self,
        clients: ClientProvider,
        context: RuntimeContext,
        client_key: str = DEFAULT_CLIENT_KEY,
    ):
        self.clients = clients
        self.context = context
        self.client_key = client_key

    def handle_exception(self, exc: BaseException) -> None:
        """Report an unhandled exception."""
        self.clients.get_client(self.client_key).capture_exception(exc)

    def handle_error(self, record: ErrorRecord) -> None:
        """Report a non-fatal runtime error such as a warning."""
        self.clients.get_client(self.client_key).capture_exception(
            ReportedError.from_record(record)
        )

    def handle_end_of_request(self, reserve: Optional[MemoryReserve] = None) -> None:
        """
        Finish error tracking for a request.

        Runs whether the request ended normally or not. Marks shutdown so
        clients stop deferring events, sends deferred events, then reports
        the last recorded error if it is a fatal one. Other error classes
        were already reported by the exception and error hooks.

        Args:
            reserve: Memory reserve of the request, released before the
                last error is inspected
        """
        if self.context.shutdown.mark():
            logger.debug("Shutdown handling started")

        client = self.clients.get_client(self.client_key)
        client.send_unsent_errors()

        if reserve is not None:
            reserve.release()

        record = self.context.pop_last_error()
        if record is None or not record.is_fatal:
            return

        client.capture_exception(ReportedError.from_record(record))
