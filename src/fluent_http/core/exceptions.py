"""
Иерархия исключений fluent-http.

Классификация:
- ConfigurationError - ошибка использования builder'а, пробрасывается сразу
- TransportError / OperationCanceledError / HTTPError / MaterializationError -
  НЕ пробрасываются из send_*, а возвращаются внутри Result.error
- LiveStreamError - пробрасывается итератором live-стрима
"""

from typing import Optional

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BASE
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPClientException(Exception):
    """Базовое исключение fluent-http."""

    def __init__(self, message: str, **kwargs):
        self.message = message
        super().__init__(message)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ КОНФИГУРАЦИИ (raise immediately)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ConfigurationError(HTTPClientException):
    """Builder использован неправильно - ошибка вызывающего кода."""


class InvalidArgumentError(ConfigurationError, ValueError):
    """
    Невалидный аргумент.

    Args:
        message: Сообщение об ошибке
        argument: Имя аргумента
    """

    def __init__(self, message: str, argument: Optional[str] = None):
        self.argument = argument
        msg = message
        if argument:
            msg += f" (argument: {argument})"
        super().__init__(msg)


class InvalidStateError(ConfigurationError, RuntimeError):
    """Операция вызвана в неправильном порядке (например, build() без URI)."""

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ТРАНСПОРТНЫЕ ОШИБКИ (ответа нет, status_code=None)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class TransportError(HTTPClientException):
    """
    Ошибка до получения ответа.

    Примеры: DNS, connection refused, TLS, таймаут.
    """

    def __init__(self, message: str, url: Optional[str] = None):
        self.url = url
        full_message = f"{message}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message)


class TimeoutError(TransportError):
    """
    Таймаут запроса.

    Args:
        message: Сообщение об ошибке
        url: URL запроса
        timeout_type: Тип таймаута ('connect', 'read', 'write' или 'pool')
    """

    def __init__(
        self,
        message: str,
        url: Optional[str] = None,
        timeout_type: Optional[str] = None
    ):
        self.timeout_type = timeout_type

        msg = message
        if timeout_type:
            msg += f" ({timeout_type} timeout)"

        super().__init__(msg, url)


class ConnectionError(TransportError):
    """
    Ошибка подключения.

    Примеры:
    - Connection refused
    - Name or service not known
    - TLS handshake failure
    """
    pass


class ProxyError(TransportError):
    """Ошибка прокси."""
    pass


class OperationCanceledError(HTTPClientException):
    """Запрос отменён через CancellationToken."""

    MESSAGE = "operation was canceled"

    def __init__(self, url: Optional[str] = None):
        self.url = url
        super().__init__(self.MESSAGE)

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# HTTP ОШИБКИ (ответ получен, статус вне [200, 400))
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class HTTPError(HTTPClientException):
    """
    Базовая HTTP ошибка.

    Args:
        status_code: HTTP статус
        url: URL
        message: Тело ответа или дополнительное сообщение
    """

    def __init__(self, status_code: int, url: str, message: str = ""):
        self.status_code = status_code
        self.url = url

        msg = f"HTTP {status_code} error for {url}"
        if message:
            msg += f": {message}"

        super().__init__(msg)


class BadRequestError(HTTPError):
    """400 Bad Request."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(400, url, message)


class UnauthorizedError(HTTPError):
    """401 Unauthorized."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(401, url, message)


class ForbiddenError(HTTPError):
    """403 Forbidden."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(403, url, message)


class NotFoundError(HTTPError):
    """404 Not Found."""

    def __init__(self, url: str, message: str = ""):
        super().__init__(404, url, message)


class TooManyRequestsError(HTTPError):
    """
    429 Rate Limit.

    Args:
        url: URL
        retry_after: Значение заголовка Retry-After
        message: Дополнительное сообщение
    """

    def __init__(self, url: str, retry_after: Optional[str] = None, message: str = ""):
        self.retry_after = retry_after
        super().__init__(429, url, message)


class ServerError(HTTPError):
    """5xx ошибка сервера."""
    pass

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# ОШИБКИ МАТЕРИАЛИЗАЦИИ (ответ успешный, тело не прочитано)
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class MaterializationError(HTTPClientException):
    """
    Не удалось прочитать или преобразовать тело ответа.

    Примеры:
    - Невалидная кодировка
    - Обрыв соединения при чтении тела
    """
    pass


class DeserializationError(MaterializationError):
    """
    Тело не удалось десериализовать в целевой тип.

    Args:
        message: Описание ошибки парсера/валидатора
        target: Целевой тип
    """

    def __init__(self, message: str, target: Optional[type] = None):
        self.target = target
        msg = "Failed to deserialize response body"
        if target is not None:
            msg += f" into {getattr(target, '__name__', repr(target))}"
        msg += f": {message}"
        super().__init__(msg)


class LiveStreamError(HTTPClientException):
    """
    Ошибка чтения после того, как live-стрим уже начал отдавать строки.

    Result уже был возвращён как успешный, поэтому ошибка пробрасывается
    из итератора.
    """

    def __init__(self, message: str, url: Optional[str] = None, lines_read: int = 0):
        self.url = url
        self.lines_read = lines_read
        msg = f"Live stream interrupted after {lines_read} line(s): {message}"
        if url:
            msg += f" (url: {url})"
        super().__init__(msg)
