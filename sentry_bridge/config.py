"""
Error Tracking Configuration

Client configuration table and integration settings, loaded from a mapping
or from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from .errors import ConfigurationError

DEFAULT_CLIENT_KEY = "default"
DEFAULT_RESERVED_MEMORY_SIZE = 10 * 1024
DEFAULT_LOG_BUFFER_CAPACITY = 100

# Client option consumed by SentryClient rather than sentry_sdk
BULK_SEND_OPTION = "store_errors_for_bulk_send"


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _env_flag(name: str, default: str) -> bool:
    return _flag(os.getenv(name, default))


@dataclass
class ClientConfig:
    """Configuration of a single error tracking client."""

    dsn: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, key: str, data: Optional[Mapping[str, Any]]) -> "ClientConfig":
        """
        Create a client config from a configuration table entry.

        Args:
            key: Configuration key, used in error messages
            data: Entry with optional 'dsn' and 'options' keys

        Raises:
            ConfigurationError: If the entry is not a mapping, has unknown
                keys, or its options are not a mapping
        """
        if data is None:
            return cls()
        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Client '{key}' must be a mapping, got {type(data).__name__}")

        unknown = set(data) - {"dsn", "options"}
        if unknown:
            raise ConfigurationError(
                f"Client '{key}' has unknown settings: {', '.join(sorted(unknown))}"
            )

        options = data.get("options") or {}
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Options of client '{key}' must be a mapping")

        return cls(dsn=data.get("dsn"), options=dict(options))


@dataclass
class TrackingConfig:
    """Configuration for the error tracking integration."""

    clients: Dict[str, ClientConfig] = field(default_factory=dict)

    # Subscribe to request lifecycle events
    auto_capture: bool = True

    # Scratch memory released before reporting fatal errors
    reserved_memory_size: int = DEFAULT_RESERVED_MEMORY_SIZE

    # Log records buffered before a batch is sent
    log_buffer_capacity: int = DEFAULT_LOG_BUFFER_CAPACITY

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "TrackingConfig":
        """
        Create config from a settings mapping.

        Usage:
            config = TrackingConfig.from_mapping({
                "clients": {
                    "default": {"dsn": "https://key@sentry.example.com/1"},
                    "payments": {"options": {"environment": "staging"}},
                },
                "auto_capture": True,
            })
        """
        clients = data.get("clients") or {}
        if not isinstance(clients, Mapping):
            raise ConfigurationError("'clients' must be a mapping of key to client settings")

        return cls(
            clients={
                str(key): ClientConfig.from_mapping(str(key), entry)
                for key, entry in clients.items()
            },
            auto_capture=_flag(data.get("auto_capture", True)),
            reserved_memory_size=int(data.get("reserved_memory_size", DEFAULT_RESERVED_MEMORY_SIZE)),
            log_buffer_capacity=int(data.get("log_buffer_capacity", DEFAULT_LOG_BUFFER_CAPACITY)),
        )

    @classmethod
    def from_env(cls) -> "TrackingConfig":
        """Create config from environment variables."""
        options: Dict[str, Any] = {}
        if os.getenv("SENTRY_ENVIRONMENT"):
            options["environment"] = os.getenv("SENTRY_ENVIRONMENT")
        if os.getenv("SENTRY_RELEASE"):
            options["release"] = os.getenv("SENTRY_RELEASE")
        if _env_flag("SENTRY_BULK_SEND", "false"):
            options[BULK_SEND_OPTION] = True

        clients = {}
        dsn = os.getenv("SENTRY_DSN")
        if dsn or options:
            clients[DEFAULT_CLIENT_KEY] = ClientConfig(dsn=dsn, options=options)

        return cls(
            clients=clients,
            auto_capture=_env_flag("SENTRY_AUTO_CAPTURE", "true"),
            reserved_memory_size=int(os.getenv("SENTRY_RESERVED_MEMORY", str(DEFAULT_RESERVED_MEMORY_SIZE))),
        )

    @property
    def sentry_enabled(self) -> bool:
        """Check if the default client has somewhere to send events."""
        default = self.clients.get(DEFAULT_CLIENT_KEY)
        return bool(default and default.dsn)
