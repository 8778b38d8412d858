"""
Client Registry

Creates error tracking clients from the configuration table and caches
them by configuration key.
"""

import logging
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional, Protocol

from ..config import DEFAULT_CLIENT_KEY, ClientConfig
from ..errors import ClientNotConfiguredError
from ..runtime import ShutdownFlag
from .client import SentryClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Any]


class ClientProvider(Protocol):
    """Anything that hands out clients by configuration key."""

    def get_client(self, key: str = DEFAULT_CLIENT_KEY) -> Any:
        ...


class ClientRegistry:
    """
    Lazily creates and caches one client per configuration key.

    Usage:
        registry = ClientRegistry({
            "default": ClientConfig(dsn="https://key@sentry.example.com/1"),
        })
        registry.get_client().capture_exception(exc)
    """

    def __init__(
        self,
        clients: Optional[Mapping[str, ClientConfig]] = None,
        client_factory: Optional[ClientFactory] = None,
        shutdown: Optional[ShutdownFlag] = None,
    ):
        """
        Initialize the registry.

        Args:
            clients: Client configurations by key
            client_factory: Called as factory() or factory(dsn, options);
                defaults to SentryClient bound to the shutdown flag
            shutdown: Shutdown flag handed to SentryClient instances
        """
        self.clients: Dict[str, ClientConfig] = dict(clients or {})
        self._factory = client_factory or partial(SentryClient, shutdown=shutdown)
        self._instances: Dict[str, Any] = {}

    def get_client(self, key: str = DEFAULT_CLIENT_KEY) -> Any:
        """
        Get the client for a configuration key, creating it on first use.

        Raises:
            ClientNotConfiguredError: If key is not 'default' and has no entry
        """
        if key not in self._instances:
            self._instances[key] = self.create_client(key)
        return self._instances[key]

    def create_client(self, key: str = DEFAULT_CLIENT_KEY) -> Any:
        """
        Create a new client for a configuration key, bypassing the cache.

        Raises:
            ClientNotConfiguredError: If key is not 'default' and has no entry
        """
        if key not in self.clients:
            if key != DEFAULT_CLIENT_KEY:
                raise ClientNotConfiguredError(key)
            logger.debug("No default client configured, creating inert client")
            return self._factory()

        config = self.clients[key]
        logger.debug("Creating error tracking client '%s'", key)
        return self._factory(config.dsn, dict(config.options))

    def has_client(self, key: str) -> bool:
        """Check if a client for this key has already been created."""
        return key in self._instances
