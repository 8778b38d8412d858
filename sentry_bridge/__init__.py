"""sentry-bridge - Sentry error tracking for Starlette applications.

Forwards unhandled exceptions, warnings, fatal errors and log records from
a Starlette (or FastAPI) application to configured Sentry clients.

Modules:
    config - Client configuration table and settings
    sentry - Client handles and the registry caching them
    events - Request lifecycle event bridge
    runtime - Shutdown flag, last error and memory reserve
    hooks - Exception routing and warning hook
    middleware - Starlette middleware
    log_handler - Logging handler sending records to Sentry
    integration - Application component
"""

from .config import ClientConfig, TrackingConfig
from .decorators import capture_errors
from .errors import ClientNotConfiguredError, ConfigurationError
from .events import EventBridge
from .integration import ErrorTracking
from .log_handler import SentryLogHandler, severity_from_log_level
from .middleware import ErrorTrackingMiddleware
from .runtime import MemoryReserve, RuntimeContext, ShutdownFlag
from .sentry import ClientRegistry, SentryClient
from .types import ErrorRecord, ErrorType, FATAL_ERROR_TYPES, ReportedError

__all__ = [
    # Config
    'ClientConfig',
    'TrackingConfig',
    # Errors
    'ConfigurationError',
    'ClientNotConfiguredError',
    # Types
    'ErrorType',
    'ErrorRecord',
    'ReportedError',
    'FATAL_ERROR_TYPES',
    # Runtime
    'RuntimeContext',
    'ShutdownFlag',
    'MemoryReserve',
    # Clients
    'SentryClient',
    'ClientRegistry',
    # Wiring
    'EventBridge',
    'ErrorTrackingMiddleware',
    'SentryLogHandler',
    'severity_from_log_level',
    'ErrorTracking',
    'capture_errors',
]

__version__ = '0.1.0'
