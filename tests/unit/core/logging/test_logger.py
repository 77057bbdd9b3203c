"""
Tests for HTTPClientLogger.

Tests HTTPClientLogger, get_logger, and configure_logging.
"""

import json
import logging

import pytest

import fluent_http.core.logging.logger as logger_module
from fluent_http.core.logging.config import LoggingConfig, LogLevel, LogFormat
from fluent_http.core.logging.filters import set_correlation_id, clear_correlation_id
from fluent_http.core.logging.logger import HTTPClientLogger, get_logger, configure_logging


@pytest.fixture(autouse=True)
def reset_shared_logger():
    logger_module._default_logger = None
    clear_correlation_id()
    yield
    if logger_module._default_logger is not None:
        logger_module._default_logger.close()
    logger_module._default_logger = None


def read_json_lines(path):
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


def json_file_logger(tmp_path, name="test_logger", **kwargs):
    file_path = tmp_path / "client.log"
    config = LoggingConfig.create(
        level="DEBUG",
        format="json",
        enable_console=False,
        enable_file=True,
        file_path=str(file_path),
        **kwargs,
    )
    return HTTPClientLogger(config, name=name), file_path


class TestHTTPClientLogger:
    """Tests for HTTPClientLogger class."""

    def test_creation_with_defaults(self):
        logger = HTTPClientLogger()

        assert logger.name == "fluent_http"
        assert logger.config.level == LogLevel.INFO
        assert logger.config.format == LogFormat.TEXT
        logger.close()

    def test_internal_logger_configured(self):
        logger = HTTPClientLogger(LoggingConfig.create(level="WARNING"), name="test_internal")
        internal = logging.getLogger("test_internal")

        assert internal.level == logging.WARNING
        assert internal.propagate is False
        assert len(internal.handlers) == 1
        logger.close()

    def test_reinit_replaces_handlers(self):
        """A second logger with the same name does not stack handlers."""
        HTTPClientLogger(name="test_reinit")
        logger = HTTPClientLogger(name="test_reinit")

        assert len(logging.getLogger("test_reinit").handlers) == 1
        logger.close()

    def test_kwargs_become_fields(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path)

        logger.info("Request completed", method="GET", status_code=200)
        logger.close()

        entry = read_json_lines(file_path)[0]
        assert entry["message"] == "Request completed"
        assert entry["method"] == "GET"
        assert entry["status_code"] == 200

    def test_sensitive_values_masked(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path)

        logger.debug("Request built", headers={"Authorization": "Bearer abc"}, api_key="k")
        logger.close()

        entry = read_json_lines(file_path)[0]
        assert entry["headers"]["Authorization"] == "***REDACTED***"
        assert entry["api_key"] == "***REDACTED***"

    def test_clashing_keys_prefixed(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path)

        logger.info("Request started", name="upload")
        logger.close()

        assert read_json_lines(file_path)[0]["field_name"] == "upload"

    def test_correlation_id_and_extra_fields(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path, extra_fields={"service": "billing"})

        set_correlation_id("corr-42")
        logger.warning("Request canceled")
        logger.close()

        entry = read_json_lines(file_path)[0]
        assert entry["correlation_id"] == "corr-42"
        assert entry["service"] == "billing"
        assert entry["level"] == "WARNING"

    def test_level_filtering(self, tmp_path):
        file_path = tmp_path / "client.log"
        config = LoggingConfig.create(
            level="ERROR", enable_console=False, enable_file=True, file_path=str(file_path)
        )
        logger = HTTPClientLogger(config, name="test_level")

        logger.info("hidden")
        logger.error("shown")
        logger.close()

        content = file_path.read_text(encoding="utf-8")
        assert "hidden" not in content
        assert "shown" in content
        assert logger.is_enabled_for(logging.ERROR)

    def test_exception_logs_traceback(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path)

        try:
            raise ValueError("bad value")
        except ValueError:
            logger.exception("Failure")
        logger.close()

        assert "ValueError: bad value" in read_json_lines(file_path)[0]["exception"]

    def test_close_idempotent_and_silences(self, tmp_path):
        logger, file_path = json_file_logger(tmp_path)

        logger.close()
        logger.close()
        logger.info("after close")

        assert logger.closed
        assert "after close" not in file_path.read_text(encoding="utf-8")

    def test_context_manager(self):
        with HTTPClientLogger(name="test_ctx") as logger:
            assert not logger.closed
        assert logger.closed


class TestSharedLogger:
    """Tests for get_logger and configure_logging."""

    def test_get_logger_singleton(self):
        assert get_logger() is get_logger()

    def test_get_logger_recreated_after_close(self):
        first = get_logger()
        first.close()

        assert get_logger() is not first

    def test_configure_logging_replaces(self):
        first = get_logger()
        second = configure_logging(LoggingConfig.create(level="DEBUG"))

        assert first.closed
        assert second is get_logger()
        assert second.config.level == LogLevel.DEBUG
