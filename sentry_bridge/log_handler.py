"""
Log Bridge

A logging handler that sends log records to the error tracking client as
captured messages, tagged with the logger name as category.
"""

import logging
from logging.handlers import BufferingHandler
from typing import Iterable, List

from .config import DEFAULT_CLIENT_KEY, DEFAULT_LOG_BUFFER_CAPACITY
from .sentry.client import DEBUG, ERROR, INFO, WARNING
from .sentry.registry import ClientProvider

# Loggers used by the client itself while sending
_IGNORED_LOGGERS = ("sentry_sdk", "urllib3")

# Fixed four-level mapping. CRITICAL and custom levels fall through to debug
# along with DEBUG itself.
_SEVERITY_BY_LEVEL = {
    logging.ERROR: ERROR,
    logging.WARNING: WARNING,
    logging.INFO: INFO,
}


def severity_from_log_level(levelno: int) -> str:
    """Map a logging level to a Sentry severity. Unmapped levels are debug."""
    return _SEVERITY_BY_LEVEL.get(levelno, DEBUG)


class SentryLogHandler(BufferingHandler):
    """
    Buffers log records and sends them to Sentry in batches.

    A batch is sent when the buffer is full, when a record at or above
    flush_level arrives, and whenever flush() is called (the middleware
    does so at the end of each request).

    Usage:
        handler = SentryLogHandler(registry)
        logging.getLogger("payments").addHandler(handler)
    """

    def __init__(
        self,
        clients: ClientProvider,
        client_key: str = DEFAULT_CLIENT_KEY,
        capacity: int = DEFAULT_LOG_BUFFER_CAPACITY,
        flush_level: int = logging.ERROR,
        level: int = logging.NOTSET,
    ):
        super().__init__(capacity)
        self.setLevel(level)
        self.clients = clients
        self.client_key = client_key
        self.flush_level = flush_level

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.split(".")[0] in _IGNORED_LOGGERS:
            return False
        return super().filter(record)

    def shouldFlush(self, record: logging.LogRecord) -> bool:
        return super().shouldFlush(record) or record.levelno >= self.flush_level

    def flush(self) -> None:
        self.acquire()
        try:
            records: List[logging.LogRecord] = self.buffer
            self.buffer = []
        finally:
            self.release()

        if records:
            self.process_logs(records)

    def process_logs(self, records: Iterable[logging.LogRecord]) -> None:
        """Send each record as a captured message."""
        client = self.clients.get_client(self.client_key)

        for record in records:
            client.capture_message(
                self.format(record),
                level=severity_from_log_level(record.levelno),
                tags={"category": record.name},
            )
