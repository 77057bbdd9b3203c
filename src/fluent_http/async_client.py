# src/fluent_http/async_client.py
"""
Асинхронный fluent HTTP клиент на базе httpx.

AsyncHTTPClient - это RequestBuilder, который умеет отправлять собранный
запрос и возвращать Result в одном из шести режимов материализации тела.
"""

import asyncio
import time
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Union

import httpx

from .core.cancellation import CancellationToken
from .core.config import HTTPClientConfig
from .core.error_handler import ErrorHandler
from .core.exceptions import (
    HTTPClientException,
    InvalidArgumentError,
    MaterializationError,
    OperationCanceledError,
)
from .core.logging import HTTPClientLogger
from .core.logging.filters import clear_correlation_id, set_correlation_id
from .core.request import RequestDescriptor
from .core.request_builder import RequestBuilder
from .core.result import Result
from .core.streams import LiveLineStream, ResponseStream
from .utils.json_codec import from_json
from .utils.sanitizer import mask_headers, mask_url

T = TypeVar("T")

EMPTY_BODY_MESSAGE = "Response body is empty"


class CompletionOption(str, Enum):
    """Когда send() возвращает ответ: после чтения тела или сразу после заголовков."""
    READ_CONTENT = "read_content"
    HEADERS_READ = "headers_read"


async def _abandon(task: "asyncio.Future[Any]") -> None:
    """Дождаться отменённой задачи; ответ, успевший прийти, закрыть."""
    try:
        value = await task
    except (asyncio.CancelledError, Exception):
        return
    if isinstance(value, httpx.Response):
        await value.aclose()


class _Call:
    """Контекст одной отправки: для логов и сообщений об ошибках."""

    __slots__ = ("method", "url", "log_url", "started")

    def __init__(self, method: str, url: str, log_url: str):
        self.method = method
        self.url = url
        self.log_url = log_url
        self.started = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        return round((time.perf_counter() - self.started) * 1000, 2)


class AsyncHTTPClient(RequestBuilder):
    """
    Fluent HTTP клиент: настройка запроса цепочкой with_* и отправка одним
    из send_* методов.

    send_* никогда не бросает исключения для сетевых и HTTP ошибок - они
    возвращаются в Result. Исключения бросаются только при неправильном
    использовании builder'а (InvalidArgumentError / InvalidStateError).

    После снятия descriptor'а builder сразу сбрасывается, так что один
    экземпляр можно переиспользовать для последовательных запросов.

    Example:
        >>> async with AsyncHTTPClient(config=HTTPClientConfig(base_url="https://api.example.com")) as http:
        ...     result = await (
        ...         http.with_uri("/users")
        ...         .with_query_parameters({"page": 2})
        ...         .send_object(list[User])
        ...     )
        ...     if result.is_success():
        ...         print(result.value)

        >>> # Внешний транспорт не закрывается клиентом
        >>> transport = httpx.AsyncClient()
        >>> http = AsyncHTTPClient(transport)
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        *,
        config: Optional[HTTPClientConfig] = None,
        owns_client: Optional[bool] = None,
        logger: Optional[HTTPClientLogger] = None,
    ):
        """
        Инициализация клиента.

        Args:
            client: Готовый httpx.AsyncClient (если None - создаётся лениво из config)
            config: HTTPClientConfig (транспортные настройки применяются только к собственному клиенту)
            owns_client: Закрывать ли client в aclose() (по умолчанию - только если создан сами)
            logger: Готовый логгер (по умолчанию создаётся из config.logging)
        """
        super().__init__()
        self._config = config or HTTPClientConfig()
        self._client = client
        self._owns_client = (client is None) if owns_client is None else owns_client
        self._error_handler = ErrorHandler()

        self._owns_logger = logger is None and self._config.logging is not None
        if logger is not None:
            self._logger: Optional[HTTPClientLogger] = logger
        elif self._config.logging is not None:
            self._logger = HTTPClientLogger(config=self._config.logging, name="fluent_http.client")
        else:
            self._logger = None

    @property
    def config(self) -> HTTPClientConfig:
        return self._config

    @property
    def owns_client(self) -> bool:
        return self._owns_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Получить или создать httpx клиент."""
        if self._client is None:
            self._client = self._config.create_transport()
            self._owns_client = True
        return self._client

    async def __aenter__(self) -> "AsyncHTTPClient":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Закрыть собственный транспорт (ровно один раз) и логгер."""
        if self._client is not None and self._owns_client:
            client, self._client = self._client, None
            await client.aclose()

        if self._owns_logger and self._logger is not None:
            self._logger.close()

    # ==================== Отправка ====================

    def _snapshot(self) -> RequestDescriptor:
        """Снять descriptor и сбросить builder."""
        descriptor = self.build()
        self.reset()
        return descriptor

    async def _race(
        self,
        awaitable: Awaitable[T],
        token: Optional[CancellationToken],
        url: Optional[str],
    ) -> T:
        """
        Дождаться awaitable, если токен не сработает раньше.

        Raises:
            OperationCanceledError: Токен сработал до завершения
        """
        if token is None:
            return await awaitable
        if token.is_cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise OperationCanceledError(url)

        task = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not task.done():
                task.cancel()
                await _abandon(task)

        if task.cancelled():
            raise OperationCanceledError(url)
        return task.result()

    async def _open(
        self,
        token: Optional[CancellationToken],
    ) -> Union[tuple, Result]:
        """
        Общий протокол всех send_*: descriptor → reset → dispatch → статус.

        Returns:
            (response, call) для успешного статуса (тело ещё не прочитано)
            или готовый Result с ошибкой
        """
        descriptor = self._snapshot()
        client = await self._get_client()

        try:
            request = descriptor.to_httpx(client)
        except httpx.InvalidURL as exc:
            raise InvalidArgumentError(f"Cannot build request: {exc}", argument="uri") from exc
        except (TypeError, ValueError) as exc:
            # Заголовки вне ASCII, неподдерживаемое тело
            raise InvalidArgumentError(f"Cannot build request: {exc}", argument="request") from exc

        url = str(request.url)
        call = _Call(
            request.method,
            url,
            mask_url(url, extra_params=self._config.security.sensitive_url_params),
        )

        if self._logger:
            set_correlation_id(request.headers.get("X-Correlation-ID") or uuid.uuid4().hex)
            self._logger.debug(
                "Request built",
                method=call.method,
                url=call.log_url,
                headers=mask_headers(request.headers),
                has_body=descriptor.has_body,
            )
            self._logger.info("Request started", method=call.method, url=call.log_url)

        try:
            response = await self._race(client.send(request, stream=True), token, url)
        except OperationCanceledError as exc:
            self._log_canceled(call)
            return Result.fail(exc)
        except Exception as exc:
            error = self._error_handler.classify_transport_exception(exc, url)
            self._log_failed(call, error)
            return Result.fail(error)

        if ErrorHandler.is_success_status(response.status_code):
            if self._logger:
                self._logger.info(
                    "Request completed",
                    method=call.method,
                    url=call.log_url,
                    status_code=response.status_code,
                    duration_ms=call.duration_ms,
                )
            return response, call

        body = await self._read_error_body(response, token)
        error = self._error_handler.classify_status(response, url, body)
        self._log_failed(call, error, response.status_code)
        return Result.fail(error, response.status_code)

    async def _read_error_body(self, response: httpx.Response, token: Optional[CancellationToken]) -> str:
        """Тело ошибочного ответа, обрезанное до error_body_max_chars. Ответ закрывается."""
        limit = self._config.error_body_max_chars
        try:
            if limit == 0:
                return ""
            await self._race(response.aread(), token, None)
            text = response.text
        except Exception:
            # Body is only decoration for the error message
            return ""
        finally:
            await response.aclose()

        text = text.strip()
        if len(text) > limit:
            return text[:limit] + "..."
        return text

    async def _send(
        self,
        token: Optional[CancellationToken],
        reader: Callable[[httpx.Response, _Call], Awaitable[Result]],
        close: bool = True,
    ) -> Result:
        """
        Отправить текущий запрос и материализовать тело через reader.

        Ошибки чтения превращаются в MaterializationError с сохранением статуса.
        ``close=False`` - ответ передаётся вызывающему коду вместе с Result.
        """
        try:
            opened = await self._open(token)
            if isinstance(opened, Result):
                return opened
            response, call = opened

            try:
                return await self._race(reader(response, call), token, call.url)
            except OperationCanceledError as exc:
                self._log_canceled(call)
                await response.aclose()
                return Result.fail(exc)
            except Exception as exc:
                await response.aclose()
                if isinstance(exc, MaterializationError):
                    error = exc
                else:
                    error = MaterializationError(
                        f"Failed to read response body: {str(exc) or exc.__class__.__name__}"
                    )
                    error.__cause__ = exc
                self._log_failed(call, error, response.status_code)
                return Result.fail(error, response.status_code)
            except asyncio.CancelledError:
                await response.aclose()
                raise
            finally:
                if close:
                    await response.aclose()
        finally:
            if self._logger:
                clear_correlation_id()

    async def _read_text(self, response: httpx.Response) -> str:
        content = await response.aread()
        if not content:
            return ""
        encoding = response.charset_encoding or self._config.default_encoding
        return content.decode(encoding)

    # ==================== Режимы ====================

    async def send(
        self,
        cancellation_token: Optional[CancellationToken] = None,
        completion: CompletionOption = CompletionOption.READ_CONTENT,
    ) -> Result[httpx.Response]:
        """
        Отправить запрос и вернуть сам httpx.Response.

        Args:
            cancellation_token: Токен отмены
            completion: READ_CONTENT - тело прочитано заранее,
                HEADERS_READ - тело не прочитано, ответ нужно закрыть

        Returns:
            Result[httpx.Response]; ответом владеет вызывающий код
        """
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            if completion is CompletionOption.READ_CONTENT:
                await resp.aread()
            return Result.ok(resp, resp.status_code)

        return await self._send(cancellation_token, reader, close=False)

    async def send_string(self, cancellation_token: Optional[CancellationToken] = None) -> Result[str]:
        """
        Тело как строка (charset из Content-Type или default_encoding).

        Example:
            >>> result = await http.with_uri("/health").send_string()
        """
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            return Result.ok(await self._read_text(resp), resp.status_code)

        return await self._send(cancellation_token, reader)

    async def send_object(
        self,
        target: Union[Type[T], Any] = Any,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Result[T]:
        """
        Тело как JSON, провалидированный в ``target``.

        Пустое тело - успех с ``value=None`` и информационным error_message.
        Невалидный JSON - ошибка с DeserializationError.

        Args:
            target: Pydantic модель, dataclass, builtin или typing конструкция
            cancellation_token: Токен отмены

        Example:
            >>> result = await http.with_uri("/users/1").send_object(User)
        """
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            text = await self._read_text(resp)
            if not text.strip():
                return Result.ok(None, resp.status_code, message=EMPTY_BODY_MESSAGE)
            return Result.ok(from_json(text, target), resp.status_code)

        return await self._send(cancellation_token, reader)

    async def send_bytes(self, cancellation_token: Optional[CancellationToken] = None) -> Result[bytes]:
        """Тело как bytes (пустое тело - b"")."""
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            return Result.ok(bytes(await resp.aread()), resp.status_code)

        return await self._send(cancellation_token, reader)

    async def send_stream(self, cancellation_token: Optional[CancellationToken] = None) -> Result[ResponseStream]:
        """
        Тело как открытый ResponseStream. Закрытие потока закрывает ответ.

        Example:
            >>> result = await http.with_uri("/files/big.bin").send_stream()
            >>> async with result:
            ...     async for chunk in result.value:
            ...         out.write(chunk)
        """
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            return Result.ok(ResponseStream(resp), resp.status_code)

        return await self._send(cancellation_token, reader, close=False)

    async def send_live_stream(
        self,
        cancellation_token: Optional[CancellationToken] = None,
    ) -> Result[LiveLineStream]:
        """
        Тело как ленивая последовательность непустых строк.

        Ошибка до начала стрима возвращается в Result. Ошибка чтения во время
        итерации бросается итератором как LiveStreamError. Отмена токеном
        просто завершает итерацию.

        Example:
            >>> result = await http.with_uri("/events").send_live_stream(cancellation_token=token)
            >>> if result.is_success():
            ...     async for line in result.value:
            ...         print(line)
        """
        async def reader(resp: httpx.Response, call: _Call) -> Result:
            stream = LiveLineStream(resp, cancellation_token, call.log_url, self._logger)
            return Result.ok(stream, resp.status_code)

        return await self._send(cancellation_token, reader, close=False)

    # ==================== Логирование ====================

    def _log_failed(self, call: _Call, error: HTTPClientException, status_code: Optional[int] = None) -> None:
        if not self._logger:
            return
        self._logger.error(
            "Request failed",
            method=call.method,
            url=call.log_url,
            status_code=status_code,
            error_type=type(error).__name__,
            error=str(error),
            duration_ms=call.duration_ms,
        )

    def _log_canceled(self, call: _Call) -> None:
        if not self._logger:
            return
        self._logger.warning(
            "Request canceled",
            method=call.method,
            url=call.log_url,
            duration_ms=call.duration_ms,
        )
