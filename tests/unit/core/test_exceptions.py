"""
Tests for custom exceptions.
"""

import pytest

from fluent_http.core.exceptions import (
    BadRequestError,
    ConfigurationError,
    ConnectionError,
    DeserializationError,
    HTTPClientException,
    HTTPError,
    InvalidArgumentError,
    InvalidStateError,
    LiveStreamError,
    MaterializationError,
    NotFoundError,
    OperationCanceledError,
    ServerError,
    TimeoutError,
    TooManyRequestsError,
    TransportError,
)


class TestHTTPClientException:
    """Test base HTTPClientException."""

    def test_exception_message(self):
        exc = HTTPClientException("Test error")
        assert str(exc) == "Test error"
        assert exc.message == "Test error"

    def test_exception_can_be_raised(self):
        with pytest.raises(HTTPClientException) as exc_info:
            raise HTTPClientException("Test error")
        assert str(exc_info.value) == "Test error"


class TestConfigurationErrors:
    """Builder misuse errors."""

    def test_invalid_argument_is_value_error(self):
        exc = InvalidArgumentError("Header key cannot be empty", argument="key")
        assert isinstance(exc, ValueError)
        assert isinstance(exc, ConfigurationError)
        assert str(exc) == "Header key cannot be empty (argument: key)"
        assert exc.argument == "key"

    def test_invalid_state_is_runtime_error(self):
        exc = InvalidStateError("Request URI must be set")
        assert isinstance(exc, RuntimeError)
        assert isinstance(exc, ConfigurationError)


class TestTransportErrors:
    """Faults before a response exists."""

    def test_connection_error_with_url(self):
        exc = ConnectionError("Connection failed", "https://example.com")
        assert str(exc) == "Connection failed (url: https://example.com)"
        assert isinstance(exc, TransportError)

    def test_timeout_error_type(self):
        exc = TimeoutError("Timed out", "https://example.com", timeout_type="connect")
        assert exc.timeout_type == "connect"
        assert "(connect timeout)" in str(exc)
        assert isinstance(exc, TransportError)

    def test_canceled_message(self):
        exc = OperationCanceledError("https://example.com")
        assert str(exc) == "operation was canceled"
        assert exc.url == "https://example.com"


class TestHTTPErrors:
    """Errors carrying a status code."""

    def test_http_error_message(self):
        exc = HTTPError(418, "https://example.com/tea", "short and stout")
        assert exc.status_code == 418
        assert str(exc) == "HTTP 418 error for https://example.com/tea: short and stout"

    def test_http_error_without_body(self):
        assert str(HTTPError(502, "https://example.com")) == "HTTP 502 error for https://example.com"

    @pytest.mark.parametrize("cls,status", [
        (BadRequestError, 400),
        (NotFoundError, 404),
    ])
    def test_fixed_status_subclasses(self, cls, status):
        exc = cls("https://example.com")
        assert exc.status_code == status
        assert isinstance(exc, HTTPError)

    def test_too_many_requests(self):
        exc = TooManyRequestsError("https://example.com", retry_after="60")
        assert exc.status_code == 429
        assert exc.retry_after == "60"

    def test_server_error(self):
        exc = ServerError(503, "https://example.com", "maintenance")
        assert exc.status_code == 503
        assert "maintenance" in str(exc)


class TestMaterializationErrors:
    """Body read and stream faults."""

    def test_deserialization_error_names_target(self):
        class User:
            pass

        exc = DeserializationError("Expecting value", User)
        assert isinstance(exc, MaterializationError)
        assert str(exc) == "Failed to deserialize response body into User: Expecting value"

    def test_deserialization_error_without_target(self):
        assert str(DeserializationError("bad")) == "Failed to deserialize response body: bad"

    def test_live_stream_error(self):
        exc = LiveStreamError("reset", url="https://example.com/events", lines_read=3)
        assert exc.lines_read == 3
        assert str(exc) == "Live stream interrupted after 3 line(s): reset (url: https://example.com/events)"
