"""
Streaming response values handed to the caller by send_stream() and
send_live_stream().

Both wrappers own the underlying ``httpx.Response``: closing the wrapper
closes the response, and closing twice is a no-op.
"""

import asyncio
import time
from enum import Enum
from typing import TYPE_CHECKING, Any, AsyncIterator, List, Optional

import httpx

from .cancellation import CancellationToken
from .exceptions import LiveStreamError

if TYPE_CHECKING:
    from .logging import HTTPClientLogger

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# BYTE STREAM
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class ResponseStream:
    """
    Тело ответа как асинхронный поток байт.

    Поддерживает ``read(size)`` в стиле файла и ``async for chunk in stream``.

    Example:
        >>> result = await http.with_uri(url).send_stream()
        >>> async with result.value as stream:
        ...     header = await stream.read(4)
        ...     async for chunk in stream:
        ...         sink.write(chunk)
    """

    def __init__(self, response: httpx.Response):
        self._response = response
        self._chunks: Optional[AsyncIterator[bytes]] = None
        self._buffer = bytearray()
        self._eof = False
        self._closed = False

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed stream")

    async def _fill(self) -> bool:
        """Дочитать следующий chunk в буфер. False - конец тела."""
        if self._eof:
            return False
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        try:
            chunk = await self._chunks.__anext__()
        except StopAsyncIteration:
            self._eof = True
            return False
        self._buffer.extend(chunk)
        return True

    async def read(self, size: int = -1) -> bytes:
        """
        Прочитать до ``size`` байт (``-1`` - до конца тела).

        Returns:
            b"" когда тело закончилось
        """
        self._check_open()
        if size is None or size < 0:
            while await self._fill():
                pass
        else:
            while len(self._buffer) < size and await self._fill():
                pass
            size = min(size, len(self._buffer))

        if size is None or size < 0:
            size = len(self._buffer)
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iter_chunks()

    async def _iter_chunks(self) -> AsyncIterator[bytes]:
        self._check_open()
        if self._buffer:
            data = bytes(self._buffer)
            self._buffer.clear()
            yield data
        while await self._fill():
            data = bytes(self._buffer)
            self._buffer.clear()
            yield data

    async def aclose(self) -> None:
        """Закрыть поток вместе с ответом. Идемпотентно."""
        if self._closed:
            return
        self._closed = True
        self._buffer.clear()
        if self._chunks is not None:
            await self._chunks.aclose()
        await self._response.aclose()

    async def __aenter__(self) -> "ResponseStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
# LIVE LINE STREAM
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class LiveStreamState(str, Enum):
    CONNECTED = "connected"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELED = "canceled"
    FAULTED = "faulted"


_FINAL_STATES = (LiveStreamState.COMPLETED, LiveStreamState.CANCELED, LiveStreamState.FAULTED)

_EOF = object()


async def _pull(lines: AsyncIterator[str]) -> Any:
    try:
        return await lines.__anext__()
    except StopAsyncIteration:
        return _EOF


class LiveLineStream:
    """
    Ленивая однопроходная последовательность непустых строк ответа.

    Чтение начинается только с первой итерации. Пустые строки и строки из
    одних пробелов пропускаются. Перед каждым чтением проверяется токен
    отмены: после отмены итерация просто заканчивается. Ответ закрывается
    при завершении, отмене, ошибке или раннем ``aclose()``.

    Raises (из итератора):
        LiveStreamError: Ошибка чтения после начала стрима

    Example:
        >>> result = await http.with_uri(url).send_live_stream(cancellation_token=token)
        >>> if result.is_success():
        ...     async for line in result.value:
        ...         handle(line)
    """

    def __init__(
        self,
        response: httpx.Response,
        cancellation_token: Optional[CancellationToken] = None,
        url: Optional[str] = None,
        logger: Optional["HTTPClientLogger"] = None,
    ):
        self._response = response
        self._token = cancellation_token
        self._url = url
        self._logger = logger
        self._state = LiveStreamState.CONNECTED
        self._lines_read = 0
        self._iterator: Optional[AsyncIterator[str]] = None

    @property
    def state(self) -> LiveStreamState:
        return self._state

    @property
    def lines_read(self) -> int:
        return self._lines_read

    @property
    def closed(self) -> bool:
        return self._response.is_closed

    def __aiter__(self) -> "LiveLineStream":
        return self

    async def __anext__(self) -> str:
        if self._iterator is None:
            if self._state in _FINAL_STATES:
                raise StopAsyncIteration
            self._iterator = self._lines()
        return await self._iterator.__anext__()

    def _cancelled(self) -> bool:
        return self._token is not None and self._token.is_cancelled

    async def _next_raw_line(self, lines: AsyncIterator[str]) -> Any:
        """
        Следующая строка, ``_EOF`` в конце тела или None, если токен
        сработал во время ожидания.
        """
        if self._token is None:
            return await _pull(lines)

        read_task = asyncio.ensure_future(_pull(lines))
        cancel_task = asyncio.ensure_future(self._token.wait())
        try:
            await asyncio.wait({read_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not read_task.done():
                read_task.cancel()
                try:
                    await read_task
                except (asyncio.CancelledError, Exception):
                    # Read abandoned after cancellation
                    pass

        if read_task.cancelled():
            return None
        return read_task.result()

    async def _lines(self) -> AsyncIterator[str]:
        started = time.perf_counter()
        self._state = LiveStreamState.STREAMING
        lines = self._response.aiter_lines()
        try:
            while True:
                if self._cancelled():
                    self._state = LiveStreamState.CANCELED
                    return
                try:
                    line = await self._next_raw_line(lines)
                except Exception as exc:
                    self._state = LiveStreamState.FAULTED
                    raise LiveStreamError(
                        str(exc) or exc.__class__.__name__, self._url, self._lines_read
                    ) from exc

                if line is _EOF:
                    self._state = LiveStreamState.COMPLETED
                    return
                if line is None:
                    self._state = LiveStreamState.CANCELED
                    return
                if not line.strip():
                    continue

                self._lines_read += 1
                yield line
        finally:
            if self._state is LiveStreamState.STREAMING:
                # Consumer stopped pulling early
                self._state = LiveStreamState.CANCELED
            await self._shutdown(lines, started)

    async def _shutdown(self, lines: AsyncIterator[str], started: float) -> None:
        try:
            await lines.aclose()
        finally:
            await self._response.aclose()

        if self._logger is not None:
            self._logger.info(
                "Live stream finished",
                url=self._url,
                state=self._state.value,
                lines=self._lines_read,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )

    async def aclose(self) -> None:
        """
        Прекратить чтение и закрыть ответ. Работает и до начала итерации.
        """
        if self._iterator is not None:
            await self._iterator.aclose()
        elif self._state not in _FINAL_STATES:
            self._state = LiveStreamState.CANCELED
        await self._response.aclose()

    async def collect(self) -> List[str]:
        """Прочитать все оставшиеся строки в список."""
        return [line async for line in self]

    async def __aenter__(self) -> "LiveLineStream":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
