"""
Pydantic settings for environment configuration.
"""

from typing import Optional, Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HTTPClientSettings(BaseSettings):
    """
    fluent-http configuration read from environment variables.

    Reads from:
    1. Environment variables (FLUENT_HTTP_*)
    2. .env file
    3. Defaults

    Example .env file:
        FLUENT_HTTP_BASE_URL=https://api.example.com
        FLUENT_HTTP_TIMEOUT_CONNECT=5
        FLUENT_HTTP_TIMEOUT_READ=30
        FLUENT_HTTP_VERIFY_SSL=true
        FLUENT_HTTP_LOG_ENABLED=true
        FLUENT_HTTP_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix='FLUENT_HTTP_',
        env_file='.env',
        env_file_encoding='utf-8',
        case_sensitive=False,
        extra='ignore',
    )

    base_url: str = Field(default="", description="Base URL of the owned transport")

    # Timeouts
    timeout_connect: float = Field(default=5.0, gt=0)
    timeout_read: float = Field(default=30.0, gt=0)
    timeout_total: Optional[float] = Field(default=None, gt=0)

    # Pool
    pool_connections: int = Field(default=10, ge=1)
    pool_maxsize: int = Field(default=100, ge=1)
    max_redirects: int = Field(default=20, ge=0)

    # Security
    verify_ssl: bool = True
    allow_redirects: bool = True

    # Responses
    error_body_max_chars: int = Field(default=1024, ge=0)
    default_encoding: str = "utf-8"

    # Logging (disabled unless log_enabled=true)
    log_enabled: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text", "colored"] = "text"
    log_enable_console: bool = True
    log_file_path: Optional[str] = None
    log_enable_correlation_id: bool = True

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if v and not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip('/')

    @model_validator(mode='after')
    def validate_timeouts(self) -> 'HTTPClientSettings':
        if self.timeout_total is not None and self.timeout_total < self.timeout_connect:
            raise ValueError(
                f"timeout_total ({self.timeout_total}) must be >= timeout_connect ({self.timeout_connect})"
            )
        return self
