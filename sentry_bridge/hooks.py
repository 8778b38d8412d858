"""
Host Hooks

Turns exceptions and Python warnings seen by the application into events
for the EventBridge, recording each one as the last error of the runtime.
"""

import logging
import threading
import warnings
from typing import Callable

from .events import EventBridge
from .runtime import RuntimeContext
from .types import ErrorRecord, classify_exception, classify_warning

logger = logging.getLogger(__name__)


def report_unhandled(bridge: EventBridge, context: RuntimeContext, exc: BaseException) -> None:
    """
    Route an exception that escaped request handling.

    Fatal errors (parse, compile, memory...) are only recorded so they are
    reported at end of request, after the memory reserve is released.
    Everything else goes to the exception hook right away.
    """
    if classify_exception(exc) is not None:
        context.record_error(ErrorRecord.from_exception(exc))
        return

    bridge.handle_exception(exc)


def install_warning_hook(bridge: EventBridge, context: RuntimeContext) -> Callable[[], None]:
    """
    Report Python warnings as runtime errors.

    Wraps warnings.showwarning; the previous hook still runs so warnings are
    displayed as before.

    Returns:
        Callable restoring the previous hook
    """
    previous = warnings.showwarning
    local = threading.local()

    def showwarning(message, category, filename, lineno, file=None, line=None):
        # Warnings raised while reporting a warning are only displayed
        if not getattr(local, "reporting", False):
            local.reporting = True
            try:
                _report_warning(message, category, filename, lineno)
            finally:
                local.reporting = False

        previous(message, category, filename, lineno, file, line)

    def _report_warning(message, category, filename, lineno):
        record = ErrorRecord(
            type=classify_warning(category),
            message=str(message),
            filename=filename,
            lineno=lineno,
        )
        context.record_error(record)
        if not record.is_fatal:
            bridge.handle_error(record)

    warnings.showwarning = showwarning
    logger.debug("Installed warning hook")

    def uninstall() -> None:
        if warnings.showwarning is showwarning:
            warnings.showwarning = previous
            logger.debug("Removed warning hook")

    return uninstall
