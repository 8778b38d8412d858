"""Shared pytest fixtures for sentry-bridge tests."""

import pytest

from sentry_bridge.config import ClientConfig
from sentry_bridge.runtime import RuntimeContext
from sentry_bridge.sentry.registry import ClientRegistry


class FakeClient:
    """Client recording calls instead of sending events."""

    def __init__(self, *args):
        self.args = args
        self.exceptions = []
        self.messages = []
        self.flush_count = 0

    def capture_exception(self, error, tags=None, extra=None):
        self.exceptions.append({"error": error, "tags": tags})
        return "event-%d" % len(self.exceptions)

    def capture_message(self, message, level="info", tags=None):
        self.messages.append({"message": message, "level": level, "tags": tags})
        return "message-%d" % len(self.messages)

    def send_unsent_errors(self):
        self.flush_count += 1
        return []


class FakeClientFactory:
    """Factory recording every client it builds."""

    def __init__(self):
        self.created = []

    def __call__(self, *args):
        client = FakeClient(*args)
        self.created.append(client)
        return client


@pytest.fixture
def client_factory():
    return FakeClientFactory()


@pytest.fixture
def runtime_context():
    """Fresh runtime state, so the shutdown flag never leaks between tests."""
    return RuntimeContext()


@pytest.fixture
def registry(client_factory, runtime_context):
    """Registry with a default and a custom client, building FakeClients."""
    return ClientRegistry(
        {
            "default": ClientConfig(dsn="https://public@sentry.example.com/1"),
            "custom": ClientConfig(dsn="X", options={"a": 1}),
        },
        client_factory=client_factory,
        shutdown=runtime_context.shutdown,
    )


@pytest.fixture
def default_client(registry):
    return registry.get_client()
