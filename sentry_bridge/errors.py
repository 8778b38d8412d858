"""Exceptions raised by the error tracking integration."""


class ConfigurationError(Exception):
    """Raised when the error tracking configuration is invalid."""


class ClientNotConfiguredError(ConfigurationError, KeyError):
    """Raised when a client is requested for a key with no configuration entry.

    Subclasses KeyError so callers treating it as a plain lookup failure
    still catch it.
    """

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"No error tracking client configured for key '{self.key}'"
