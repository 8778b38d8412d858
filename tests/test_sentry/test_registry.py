"""Tests for the client registry (registry.py)."""

import pytest
from unittest.mock import patch

from sentry_bridge.config import ClientConfig
from sentry_bridge.errors import ClientNotConfiguredError, ConfigurationError
from sentry_bridge.runtime import ShutdownFlag
from sentry_bridge.sentry.registry import ClientRegistry


class TestGetClient:
    def test_returns_same_instance_for_default(self, registry):
        assert registry.get_client() is registry.get_client("default")

    def test_returns_same_instance_for_custom_key(self, registry, client_factory):
        first = registry.get_client("custom")
        second = registry.get_client("custom")
        assert first is second
        assert len(client_factory.created) == 1

    def test_different_keys_get_different_clients(self, registry):
        assert registry.get_client("default") is not registry.get_client("custom")

    def test_has_client_after_first_use(self, registry):
        assert not registry.has_client("custom")
        registry.get_client("custom")
        assert registry.has_client("custom")

    def test_missing_key_is_not_cached(self, registry):
        with pytest.raises(ClientNotConfiguredError):
            registry.get_client("missingKey")
        assert not registry.has_client("missingKey")


class TestCreateClient:
    def test_always_builds_new_instance(self, registry, client_factory):
        cached = registry.get_client("custom")
        created = registry.create_client("custom")
        assert created is not cached
        assert registry.get_client("custom") is cached
        assert len(client_factory.created) == 2

    def test_default_without_config_uses_no_arguments(self, client_factory):
        registry = ClientRegistry({}, client_factory=client_factory)
        client = registry.create_client("default")
        assert client.args == ()

    def test_configured_entry_passes_dsn_and_options(self, registry):
        client = registry.create_client("custom")
        assert client.args == ("X", {"a": 1})

    def test_entry_without_dsn_passes_none(self, client_factory):
        registry = ClientRegistry(
            {"justOptions": ClientConfig(options={"environment": "staging"})},
            client_factory=client_factory,
        )
        client = registry.create_client("justOptions")
        assert client.args == (None, {"environment": "staging"})

    def test_options_are_copied(self, registry):
        client = registry.create_client("custom")
        client.args[1]["a"] = 2
        assert registry.clients["custom"].options == {"a": 1}

    def test_missing_non_default_key_raises_lookup_error(self, registry):
        with pytest.raises(LookupError):
            registry.create_client("missingKey")

    def test_missing_key_error_is_configuration_error(self, registry):
        with pytest.raises(ConfigurationError, match="missingKey"):
            registry.create_client("missingKey")


class TestDefaultFactory:
    @patch("sentry_bridge.sentry.registry.SentryClient")
    def test_builds_sentry_client_with_shutdown_flag(self, mock_client):
        shutdown = ShutdownFlag()
        registry = ClientRegistry(
            {"default": ClientConfig(dsn="https://public@sentry.example.com/1")},
            shutdown=shutdown,
        )

        registry.get_client()

        mock_client.assert_called_once_with(
            "https://public@sentry.example.com/1", {}, shutdown=shutdown
        )

    @patch("sentry_bridge.sentry.registry.SentryClient")
    def test_inert_default_client(self, mock_client):
        registry = ClientRegistry()
        registry.get_client()
        mock_client.assert_called_once_with(shutdown=None)
