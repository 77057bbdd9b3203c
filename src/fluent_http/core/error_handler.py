# src/fluent_http/core/error_handler.py

from typing import Optional

import httpx

from .exceptions import (
    BadRequestError,
    ConnectionError,
    ForbiddenError,
    HTTPClientException,
    HTTPError,
    NotFoundError,
    ProxyError,
    ServerError,
    TimeoutError,
    TooManyRequestsError,
    TransportError,
    UnauthorizedError,
)

_TIMEOUT_TYPES = {
    httpx.ConnectTimeout: "connect",
    httpx.ReadTimeout: "read",
    httpx.WriteTimeout: "write",
    httpx.PoolTimeout: "pool",
}


def _describe(error: BaseException) -> str:
    """Текст исключения или имя класса, если текст пустой."""
    text = str(error)
    return text if text else error.__class__.__name__


class ErrorHandler:
    """Класс для классификации ошибок транспорта и HTTP статусов"""

    @staticmethod
    def is_success_status(status_code: int) -> bool:
        """Успех - любой статус в диапазоне [200, 400)"""
        return 200 <= status_code < 400

    @staticmethod
    def classify_transport_exception(error: BaseException, url: Optional[str] = None) -> HTTPClientException:
        """Преобразует исключение httpx (или любое другое) в TransportError"""

        if isinstance(error, HTTPClientException):
            return error

        if isinstance(error, httpx.TimeoutException):
            timeout_type = next(
                (name for cls, name in _TIMEOUT_TYPES.items() if isinstance(error, cls)),
                None,
            )
            return TimeoutError(_describe(error), url, timeout_type=timeout_type)

        elif isinstance(error, httpx.ProxyError):
            return ProxyError(_describe(error), url)

        elif isinstance(error, httpx.ConnectError):
            return ConnectionError(_describe(error), url)

        elif isinstance(error, httpx.HTTPError):
            return TransportError(f"Request failed: {_describe(error)}", url)

        else:
            return TransportError(f"Unexpected error: {_describe(error)}", url)

    @staticmethod
    def classify_status(response: httpx.Response, url: str, body: str = "") -> HTTPError:
        """Строит HTTPError по статус коду ответа"""

        status_code = response.status_code

        if status_code == 400:
            return BadRequestError(url, body)

        elif status_code == 401:
            return UnauthorizedError(url, body)

        elif status_code == 403:
            return ForbiddenError(url, body)

        elif status_code == 404:
            return NotFoundError(url, body)

        elif status_code == 429:
            return TooManyRequestsError(url, retry_after=response.headers.get("Retry-After"), message=body)

        elif 500 <= status_code < 600:
            return ServerError(status_code, url, body)

        else:
            return HTTPError(status_code, url, body)
