"""Tests for the event bridge (events.py)."""

import pytest

from sentry_bridge.events import EventBridge
from sentry_bridge.runtime import MemoryReserve
from sentry_bridge.types import ErrorRecord, ErrorType, ReportedError


@pytest.fixture
def bridge(registry, runtime_context):
    return EventBridge(registry, runtime_context)


class TestHandleException:
    def test_forwards_exception_to_default_client(self, bridge, default_client):
        error = ValueError("boom")
        bridge.handle_exception(error)

        assert len(default_client.exceptions) == 1
        assert default_client.exceptions[0]["error"] is error
        assert default_client.exceptions[0]["tags"] is None

    def test_uses_configured_client_key(self, registry, runtime_context):
        bridge = EventBridge(registry, runtime_context, client_key="custom")
        bridge.handle_exception(ValueError("boom"))

        assert len(registry.get_client("custom").exceptions) == 1
        assert not registry.has_client("default")


class TestHandleError:
    def test_wraps_record_into_reported_error(self, bridge, default_client):
        bridge.handle_error(ErrorRecord(ErrorType.WARNING, "division by zero", "app.py", 42))

        error = default_client.exceptions[0]["error"]
        assert isinstance(error, ReportedError)
        assert error.message == "division by zero"
        assert error.error_type == ErrorType.WARNING
        assert error.filename == "app.py"
        assert error.lineno == 42


class TestHandleEndOfRequest:
    def test_marks_shutdown(self, bridge, runtime_context):
        bridge.handle_end_of_request()
        assert runtime_context.shutdown.is_set

    def test_shutdown_set_once_across_requests(self, bridge, runtime_context):
        bridge.handle_end_of_request()
        bridge.handle_end_of_request()

        assert runtime_context.shutdown.is_set
        assert runtime_context.shutdown.mark() is False

    def test_sends_unsent_errors(self, bridge, default_client):
        bridge.handle_end_of_request()
        bridge.handle_end_of_request()
        assert default_client.flush_count == 2

    def test_no_last_error_forwards_nothing(self, bridge, default_client):
        bridge.handle_end_of_request()
        assert default_client.exceptions == []

    def test_parse_error_forwarded_once(self, bridge, runtime_context, default_client):
        runtime_context.record_error(ErrorRecord(ErrorType.PARSE, "unexpected EOF", "views.py", 3))

        bridge.handle_end_of_request()

        assert len(default_client.exceptions) == 1
        error = default_client.exceptions[0]["error"]
        assert isinstance(error, ReportedError)
        assert error.error_type == ErrorType.PARSE

    def test_user_notice_not_forwarded(self, bridge, runtime_context, default_client):
        runtime_context.record_error(ErrorRecord(ErrorType.USER_NOTICE, "just so you know"))

        bridge.handle_end_of_request()

        assert default_client.exceptions == []

    @pytest.mark.parametrize("error_type", [
        ErrorType.ERROR,
        ErrorType.CORE_ERROR,
        ErrorType.CORE_WARNING,
        ErrorType.COMPILE_ERROR,
        ErrorType.COMPILE_WARNING,
        ErrorType.STRICT,
    ])
    def test_other_fatal_classes_forwarded(self, bridge, runtime_context, default_client, error_type):
        runtime_context.record_error(ErrorRecord(error_type, "fatal"))
        bridge.handle_end_of_request()
        assert len(default_client.exceptions) == 1

    def test_last_error_reported_only_once(self, bridge, runtime_context, default_client):
        runtime_context.record_error(ErrorRecord(ErrorType.ERROR, "oom"))

        bridge.handle_end_of_request()
        bridge.handle_end_of_request()

        assert len(default_client.exceptions) == 1

    def test_releases_memory_reserve(self, bridge):
        reserve = MemoryReserve()
        reserve.reserve()

        bridge.handle_end_of_request(reserve)

        assert not reserve.held

    def test_shutdown_marked_before_flush(self, bridge, runtime_context, default_client):
        seen = []
        default_client.send_unsent_errors = lambda: seen.append(runtime_context.shutdown.is_set)

        bridge.handle_end_of_request()

        assert seen == [True]

    def test_client_errors_propagate(self, bridge, runtime_context, default_client):
        def fail(error, tags=None, extra=None):
            raise ConnectionError("sentry unreachable")

        default_client.capture_exception = fail
        runtime_context.record_error(ErrorRecord(ErrorType.PARSE, "bad"))

        with pytest.raises(ConnectionError):
            bridge.handle_end_of_request()
