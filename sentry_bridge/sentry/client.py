"""
Sentry Client Handle

Wraps a sentry_sdk.Client so events can be sent through a specific client
instance instead of the globally initialized one.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import sentry_sdk

from ..config import BULK_SEND_OPTION
from ..runtime import ShutdownFlag

logger = logging.getLogger(__name__)

# Severity levels understood by Sentry
DEBUG = "debug"
INFO = "info"
WARNING = "warning"
ERROR = "error"
FATAL = "fatal"


class SentryClient:
    """
    Error tracking client built from a DSN and an options mapping.

    Options are passed to sentry_sdk.Client, except
    'store_errors_for_bulk_send': when enabled, captured events are held
    until send_unsent_errors() is called, unless shutdown handling has
    already begun, in which case they are sent immediately. sentry_sdk
    integrations are off unless enabled through the options.

    Usage:
        client = SentryClient("https://key@sentry.example.com/1", {"environment": "staging"})
        client.capture_exception(exc)
        client.capture_message("Cache miss rate high", level=WARNING, tags={"category": "cache"})
    """

    def __init__(
        self,
        dsn: Optional[str] = None,
        options: Optional[Dict[str, Any]] = None,
        shutdown: Optional[ShutdownFlag] = None,
    ):
        """
        Initialize the client.

        Args:
            dsn: Sentry DSN, None for a client that sends nothing
            options: sentry_sdk.Client options plus 'store_errors_for_bulk_send'
            shutdown: Flag consulted before deferring events
        """
        options = dict(options or {})
        self.store_errors_for_bulk_send = bool(options.pop(BULK_SEND_OPTION, False))
        self.shutdown = shutdown
        self.dsn = dsn
        # Integrations patch the whole process; they stay off unless requested
        options.setdefault("default_integrations", False)
        options.setdefault("auto_enabling_integrations", False)
        self._client = sentry_sdk.Client(dsn=dsn, **options)
        self._pending: List[Callable[[sentry_sdk.Scope], Optional[str]]] = []

    @property
    def pending_count(self) -> int:
        """Number of events held for bulk sending."""
        return len(self._pending)

    def capture_exception(
        self,
        error: BaseException,
        tags: Optional[Dict[str, str]] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> Optional[str]:
        """
        Capture an exception.

        Args:
            error: The exception to capture
            tags: Additional tags
            extra: Additional context data

        Returns:
            Sentry event ID if sent, None if deferred or dropped
        """
        return self._dispatch(
            lambda scope: scope.capture_exception(error, tags=tags or {}, extras=extra or {})
        )

    def capture_message(
        self,
        message: str,
        level: str = INFO,
        tags: Optional[Dict[str, str]] = None,
    ) -> Optional[str]:
        """
        Capture a message.

        Args:
            message: Message to capture
            level: Severity level (debug, info, warning, error, fatal)
            tags: Additional tags

        Returns:
            Sentry event ID if sent, None if deferred or dropped
        """
        return self._dispatch(
            lambda scope: scope.capture_message(message, level=level, tags=tags or {})
        )

    def send_unsent_errors(self) -> List[str]:
        """
        Send events held for bulk sending and flush the transport.

        Returns:
            Sentry event IDs of the deferred events that were sent
        """
        pending, self._pending = self._pending, []
        if not pending:
            return []

        logger.debug("Sending %d deferred events", len(pending))
        event_ids = [self._send(capture) for capture in pending]
        self._client.flush()
        return [event_id for event_id in event_ids if event_id]

    def _dispatch(self, capture: Callable[[sentry_sdk.Scope], Optional[str]]) -> Optional[str]:
        if self.store_errors_for_bulk_send and not self._shutting_down():
            self._pending.append(capture)
            return None
        return self._send(capture)

    def _send(self, capture: Callable[[sentry_sdk.Scope], Optional[str]]) -> Optional[str]:
        # A client without DSN or transport drops events instead of
        # falling back to the globally initialized client
        if self._client.transport is None:
            return None

        # Scope.capture_* resolves the client from the current scope
        with sentry_sdk.new_scope() as scope:
            scope.set_client(self._client)
            return capture(scope)

    def _shutting_down(self) -> bool:
        return self.shutdown is not None and self.shutdown.is_set
