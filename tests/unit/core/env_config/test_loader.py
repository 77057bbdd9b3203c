"""Tests for load_from_env."""

import pytest
from pydantic import ValidationError

from fluent_http.core.config import HTTPClientConfig
from fluent_http.core.env_config import load_from_env
from fluent_http.core.logging import LogFormat, LogLevel


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Изолировать тесты от FLUENT_HTTP_* и ./.env."""
    import os

    for key in list(os.environ):
        if key.startswith("FLUENT_HTTP_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


class TestLoadFromEnv:
    """Environment → HTTPClientConfig."""

    def test_defaults(self):
        config = load_from_env()

        assert isinstance(config, HTTPClientConfig)
        assert config.base_url is None
        assert config.timeout.connect == 5.0
        assert config.timeout.read == 30.0
        assert config.error_body_max_chars == 1024
        assert config.logging is None

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FLUENT_HTTP_BASE_URL", "https://api.example.com/")
        monkeypatch.setenv("FLUENT_HTTP_TIMEOUT_READ", "45")
        monkeypatch.setenv("FLUENT_HTTP_VERIFY_SSL", "false")
        monkeypatch.setenv("FLUENT_HTTP_POOL_MAXSIZE", "7")
        monkeypatch.setenv("FLUENT_HTTP_ERROR_BODY_MAX_CHARS", "64")

        config = load_from_env()

        assert config.base_url == "https://api.example.com"
        assert config.timeout.read == 45
        assert config.security.verify_ssl is False
        assert config.pool.pool_maxsize == 7
        assert config.error_body_max_chars == 64

    def test_env_file(self, tmp_path):
        env_file = tmp_path / "custom.env"
        env_file.write_text(
            "FLUENT_HTTP_BASE_URL=https://file.example.com\n"
            "FLUENT_HTTP_DEFAULT_ENCODING=latin-1\n"
        )

        config = load_from_env(env_file=str(env_file))

        assert config.base_url == "https://file.example.com"
        assert config.default_encoding == "latin-1"

    def test_overrides_win_over_environment(self, monkeypatch):
        monkeypatch.setenv("FLUENT_HTTP_BASE_URL", "https://env.example.com")

        config = load_from_env(base_url="https://override.example.com")

        assert config.base_url == "https://override.example.com"

    def test_logging_enabled(self, monkeypatch, tmp_path):
        log_file = tmp_path / "client.log"
        monkeypatch.setenv("FLUENT_HTTP_LOG_ENABLED", "true")
        monkeypatch.setenv("FLUENT_HTTP_LOG_LEVEL", "debug")
        monkeypatch.setenv("FLUENT_HTTP_LOG_FORMAT", "json")
        monkeypatch.setenv("FLUENT_HTTP_LOG_FILE_PATH", str(log_file))

        config = load_from_env()

        assert config.logging is not None
        assert config.logging.level is LogLevel.DEBUG
        assert config.logging.format is LogFormat.JSON
        assert config.logging.enable_file is True
        assert config.logging.file_path == str(log_file)


class TestValidation:
    """Невалидные значения поднимают pydantic.ValidationError."""

    def test_bad_base_url(self, monkeypatch):
        monkeypatch.setenv("FLUENT_HTTP_BASE_URL", "ftp://example.com")
        with pytest.raises(ValidationError):
            load_from_env()

    def test_non_positive_timeout(self, monkeypatch):
        monkeypatch.setenv("FLUENT_HTTP_TIMEOUT_CONNECT", "0")
        with pytest.raises(ValidationError):
            load_from_env()

    def test_total_below_connect(self):
        with pytest.raises(ValidationError, match="timeout_total"):
            load_from_env(timeout_connect=10, timeout_total=5)

    def test_unknown_log_level(self, monkeypatch):
        monkeypatch.setenv("FLUENT_HTTP_LOG_LEVEL", "verbose")
        with pytest.raises(ValidationError):
            load_from_env()
