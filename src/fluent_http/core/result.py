"""
Result envelope returned by every send_* method.
"""

from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

from .exceptions import HTTPClientException, OperationCanceledError

T = TypeVar("T")


@dataclass
class Result(Generic[T]):
    """
    Результат отправки запроса.

    Либо ``success=True`` и значение, либо ``success=False`` и непустое
    ``error_message``. Исключение: send_object с пустым телом - успех,
    ``value is None`` и информационное сообщение.

    Если value - httpx.Response, ResponseStream или LiveLineStream, им владеет
    вызывающий код: ``await result.aclose()`` или ``async with result:``.

    Args:
        success: Статус в [200, 400) и тело успешно прочитано
        value: Материализованное тело (None при ошибке)
        error_message: Описание ошибки
        status_code: HTTP статус (None, если ответа не было)
        error: Классифицированное исключение (None при успехе)

    Example:
        >>> result = await http.with_uri("/users/1").send_object(User)
        >>> if result.is_success():
        ...     print(result.value.name)
        ... else:
        ...     print(result.status_code, result.error_message)
    """
    success: bool
    value: Optional[T] = None
    error_message: Optional[str] = None
    status_code: Optional[int] = None
    error: Optional[HTTPClientException] = field(default=None, repr=False)

    # ==================== Фабрики ====================

    @classmethod
    def ok(cls, value: T, status_code: Optional[int] = None, message: Optional[str] = None) -> "Result[T]":
        return cls(True, value, message, status_code)

    @classmethod
    def fail(cls, error: HTTPClientException, status_code: Optional[int] = None) -> "Result[T]":
        message = str(error) or error.__class__.__name__
        return cls(False, None, message, status_code, error)

    @classmethod
    def canceled(cls, url: Optional[str] = None) -> "Result[T]":
        return cls.fail(OperationCanceledError(url))

    # ==================== Доступ ====================

    def is_success(self) -> bool:
        return self.success

    @property
    def is_canceled(self) -> bool:
        return isinstance(self.error, OperationCanceledError)

    def __bool__(self) -> bool:
        raise TypeError("Result has no truth value, use result.is_success()")

    # ==================== Ресурсы ====================

    async def aclose(self) -> None:
        """Освободить ответ / поток внутри value. Повторный вызов безопасен."""
        closer = getattr(self.value, "aclose", None)
        if callable(closer):
            await closer()

    async def __aenter__(self) -> "Result[T]":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
