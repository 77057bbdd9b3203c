"""fluent-http - fluent HTTP request builder with Result-wrapped responses."""

import logging
from importlib.metadata import version, PackageNotFoundError

from .async_client import AsyncHTTPClient, CompletionOption
from .core.config import (
    HTTPClientConfig,
    TimeoutConfig,
    ConnectionPoolConfig,
    SecurityConfig,
)
from .core.exceptions import (
    HTTPClientException,
    ConfigurationError,
    InvalidArgumentError,
    InvalidStateError,
    TransportError,
    TimeoutError,
    ConnectionError,
    ProxyError,
    OperationCanceledError,
    HTTPError,
    BadRequestError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    TooManyRequestsError,
    ServerError,
    MaterializationError,
    DeserializationError,
    LiveStreamError,
)
from .core.cancellation import CancellationToken
from .core.request import HttpMethod, RequestContent, RequestDescriptor
from .core.request_builder import RequestBuilder
from .core.result import Result
from .core.streams import ResponseStream, LiveLineStream, LiveStreamState
from .core.env_config import load_from_env
from .core.logging import LoggingConfig
from .utils.multipart import MultipartContentBuilder, MultipartContent

# Библиотека не настраивает logging сама
logging.getLogger("fluent_http").addHandler(logging.NullHandler())

try:
    __version__ = version("fluent-http")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"

__all__ = [
    # Client
    "AsyncHTTPClient",
    "CompletionOption",
    "RequestBuilder",
    "RequestDescriptor",
    "RequestContent",
    "HttpMethod",
    "CancellationToken",
    "MultipartContentBuilder",
    "MultipartContent",
    # Results
    "Result",
    "ResponseStream",
    "LiveLineStream",
    "LiveStreamState",
    # Config
    "HTTPClientConfig",
    "TimeoutConfig",
    "ConnectionPoolConfig",
    "SecurityConfig",
    "LoggingConfig",
    "load_from_env",
    # Exceptions
    "HTTPClientException",
    "ConfigurationError",
    "InvalidArgumentError",
    "InvalidStateError",
    "TransportError",
    "TimeoutError",
    "ConnectionError",
    "ProxyError",
    "OperationCanceledError",
    "HTTPError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "TooManyRequestsError",
    "ServerError",
    "MaterializationError",
    "DeserializationError",
    "LiveStreamError",
    "__version__",
]
