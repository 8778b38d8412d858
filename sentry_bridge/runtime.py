"""
Runtime State

Process-level state shared by the request hooks and the clients: the
one-shot shutdown flag, the last recorded error and the per-request memory
reserve used to report fatal errors under memory exhaustion.
"""

import logging
import threading
from typing import Optional

from .config import DEFAULT_RESERVED_MEMORY_SIZE
from .types import ErrorRecord

logger = logging.getLogger(__name__)


class ShutdownFlag:
    """One-shot flag recording that shutdown handling has begun."""

    def __init__(self):
        self._set = False
        self._lock = threading.Lock()

    def mark(self) -> bool:
        """
        Set the flag if it is not set yet.

        Returns:
            True if this call set the flag, False if it was already set
        """
        with self._lock:
            if self._set:
                return False
            self._set = True
            return True

    @property
    def is_set(self) -> bool:
        return self._set


class MemoryReserve:
    """
    Scratch memory held for the duration of one request.

    Releasing it before inspecting fatal errors leaves headroom to build and
    send one more report after a MemoryError.

    Usage:
        reserve = MemoryReserve()
        reserve.reserve()
        ...
        reserve.release()
    """

    def __init__(self, size: int = DEFAULT_RESERVED_MEMORY_SIZE):
        self.size = size
        self._block: Optional[bytearray] = None

    def reserve(self) -> None:
        self._block = bytearray(self.size)

    def release(self) -> None:
        self._block = None

    @property
    def held(self) -> bool:
        return self._block is not None


class RuntimeContext:
    """
    State owned by the process running the application.

    Holds the shutdown flag read by clients and the last error recorded by
    the host hooks. Create one per process and pass it to the component.
    """

    def __init__(self, shutdown: Optional[ShutdownFlag] = None):
        self.shutdown = shutdown or ShutdownFlag()
        self._last_error: Optional[ErrorRecord] = None
        self._lock = threading.Lock()

    def record_error(self, record: ErrorRecord) -> None:
        """Record an error, replacing any previously recorded one."""
        with self._lock:
            self._last_error = record
        logger.debug("Recorded %s error: %s", record.type.value, record.message)

    def last_error(self) -> Optional[ErrorRecord]:
        return self._last_error

    def pop_last_error(self) -> Optional[ErrorRecord]:
        """Get the last recorded error and clear the slot."""
        with self._lock:
            record, self._last_error = self._last_error, None
        return record
