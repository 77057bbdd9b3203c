"""Core fluent-http модули."""

from .config import (
    TimeoutConfig,
    ConnectionPoolConfig,
    SecurityConfig,
    HTTPClientConfig,
)
from .exceptions import (
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
from .error_handler import ErrorHandler
from .cancellation import CancellationToken
from .request import HttpMethod, RequestContent, RequestDescriptor, ContentKind, is_content_header
from .request_builder import RequestBuilder
from .result import Result
from .streams import ResponseStream, LiveLineStream, LiveStreamState

__all__ = [
    # Config
    'TimeoutConfig',
    'ConnectionPoolConfig',
    'SecurityConfig',
    'HTTPClientConfig',
    # Exceptions
    'HTTPClientException',
    'ConfigurationError',
    'InvalidArgumentError',
    'InvalidStateError',
    'TransportError',
    'TimeoutError',
    'ConnectionError',
    'ProxyError',
    'OperationCanceledError',
    'HTTPError',
    'BadRequestError',
    'UnauthorizedError',
    'ForbiddenError',
    'NotFoundError',
    'TooManyRequestsError',
    'ServerError',
    'MaterializationError',
    'DeserializationError',
    'LiveStreamError',
    'ErrorHandler',
    # Request
    'CancellationToken',
    'HttpMethod',
    'ContentKind',
    'RequestContent',
    'RequestDescriptor',
    'RequestBuilder',
    'is_content_header',
    # Response
    'Result',
    'ResponseStream',
    'LiveLineStream',
    'LiveStreamState',
]
