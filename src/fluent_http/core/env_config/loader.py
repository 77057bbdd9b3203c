"""
Configuration loader from environment variables and .env files.
"""

from typing import Any, Optional

from ..config import (
    HTTPClientConfig,
    TimeoutConfig,
    SecurityConfig,
    ConnectionPoolConfig,
)
from ..logging.config import LoggingConfig, LogLevel, LogFormat
from .validator import HTTPClientSettings


def load_from_env(env_file: Optional[str] = None, **overrides: Any) -> HTTPClientConfig:
    """
    Load HTTPClientConfig from environment variables.

    Priority (highest to lowest):
    1. **overrides - explicit values, named like the settings fields
    2. Environment variables (FLUENT_HTTP_*)
    3. .env file
    4. Defaults

    Args:
        env_file: Custom .env file path (default: ./.env)
        **overrides: Explicit settings overrides

    Raises:
        pydantic.ValidationError: If a value fails validation

    Example:
        >>> config = load_from_env(base_url="https://custom.api.com")
    """
    if env_file is not None:
        settings = HTTPClientSettings(_env_file=env_file, **overrides)
    else:
        settings = HTTPClientSettings(**overrides)

    logging_config = None
    if settings.log_enabled:
        logging_config = LoggingConfig(
            level=LogLevel(settings.log_level),
            format=LogFormat(settings.log_format),
            enable_console=settings.log_enable_console,
            enable_file=settings.log_file_path is not None,
            file_path=settings.log_file_path,
            enable_correlation_id=settings.log_enable_correlation_id,
        )

    return HTTPClientConfig(
        base_url=settings.base_url or None,
        timeout=TimeoutConfig(
            connect=settings.timeout_connect,
            read=settings.timeout_read,
            total=settings.timeout_total,
        ),
        pool=ConnectionPoolConfig(
            pool_connections=settings.pool_connections,
            pool_maxsize=settings.pool_maxsize,
            max_redirects=settings.max_redirects,
        ),
        security=SecurityConfig(
            verify_ssl=settings.verify_ssl,
            allow_redirects=settings.allow_redirects,
        ),
        error_body_max_chars=settings.error_body_max_chars,
        default_encoding=settings.default_encoding,
        logging=logging_config,
    )
