"""
Error Tracking Component

Ties together configuration, client registry, runtime state, event bridge
and log handlers, and wires them into a Starlette application.
"""

import logging
from typing import Any, Callable, List, Optional

from starlette.applications import Starlette

from .config import DEFAULT_CLIENT_KEY, TrackingConfig
from .events import EventBridge
from .hooks import install_warning_hook
from .log_handler import SentryLogHandler
from .middleware import ErrorTrackingMiddleware
from .runtime import RuntimeContext
from .sentry.registry import ClientFactory, ClientRegistry

logger = logging.getLogger(__name__)


class ErrorTracking:
    """
    Application component giving access to configured error tracking clients.

    Usage:
        tracking = ErrorTracking(TrackingConfig.from_env())
        tracking.init_app(app)

        # Anywhere else
        tracking.get_client().capture_exception(exc)
        tracking.get_client("payments").capture_message("Refund issued")

        # Send application logs to Sentry
        logging.getLogger("payments").addHandler(tracking.log_handler())
    """

    def __init__(
        self,
        config: Optional[TrackingConfig] = None,
        context: Optional[RuntimeContext] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the component.

        Args:
            config: TrackingConfig, loaded from the environment if omitted
            context: Runtime state shared by the process
            client_factory: Replaces SentryClient construction
        """
        self.config = config or TrackingConfig.from_env()
        self.context = context or RuntimeContext()
        self.registry = ClientRegistry(
            self.config.clients,
            client_factory=client_factory,
            shutdown=self.context.shutdown,
        )
        self.bridge = EventBridge(self.registry, self.context)
        self.log_handlers: List[SentryLogHandler] = []
        self._uninstall_warning_hook: Optional[Callable[[], None]] = None

    def get_client(self, key: str = DEFAULT_CLIENT_KEY) -> Any:
        """Get the cached client for a configuration key."""
        return self.registry.get_client(key)

    def create_client(self, key: str = DEFAULT_CLIENT_KEY) -> Any:
        """Create a new, uncached client for a configuration key."""
        return self.registry.create_client(key)

    def log_handler(
        self,
        client_key: str = DEFAULT_CLIENT_KEY,
        level: int = logging.NOTSET,
    ) -> SentryLogHandler:
        """
        Create a log handler sending records through this component.

        The handler is flushed at the end of every request handled by the
        application passed to init_app.
        """
        handler = SentryLogHandler(
            self.registry,
            client_key=client_key,
            capacity=self.config.log_buffer_capacity,
            level=level,
        )
        self.log_handlers.append(handler)
        return handler

    def init_app(self, app: Starlette) -> None:
        """
        Register with a Starlette application.

        Automatic capture adds the error tracking middleware and reports
        Python warnings; without it the component is only stored on
        app.state for manual use.
        """
        app.state.error_tracking = self

        if not self.config.auto_capture:
            logger.debug("Automatic error capture disabled")
            return

        app.add_middleware(
            ErrorTrackingMiddleware,
            bridge=self.bridge,
            log_handlers=self.log_handlers,
            reserved_memory_size=self.config.reserved_memory_size,
        )

        if self._uninstall_warning_hook is None:
            self._uninstall_warning_hook = install_warning_hook(self.bridge, self.context)

        if not self.config.sentry_enabled:
            logger.warning("No default Sentry DSN configured, errors will not be sent")

    def close(self) -> None:
        """Remove the warning hook and send buffered log records."""
        if self._uninstall_warning_hook is not None:
            self._uninstall_warning_hook()
            self._uninstall_warning_hook = None

        for handler in self.log_handlers:
            handler.flush()
