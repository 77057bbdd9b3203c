"""
Cooperative cancellation signal for send_* calls and live streams.
"""

import asyncio
from typing import Optional

from .exceptions import OperationCanceledError


class CancellationToken:
    """
    Сигнал отмены, который можно передать в любой send_* метод.

    Отмена необратима. Токен можно создать вне event loop, ожидать его
    нужно внутри.

    Example:
        >>> token = CancellationToken()
        >>> task = asyncio.create_task(http.with_uri(url).send_string(cancellation_token=token))
        >>> token.cancel()
        >>> result = await task
        >>> result.error_message
        'operation was canceled'
    """

    def __init__(self):
        self._event = asyncio.Event()
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Запросить отмену. Повторный вызов ничего не делает."""
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def cancel_after(self, delay: float) -> None:
        """Отменить через ``delay`` секунд (нужен запущенный event loop)."""
        if delay < 0:
            raise ValueError("delay must be non-negative")
        if self.is_cancelled:
            return
        if self._timer is not None:
            self._timer.cancel()
        self._timer = asyncio.get_running_loop().call_later(delay, self.cancel)

    async def wait(self) -> None:
        """Дождаться отмены."""
        await self._event.wait()

    def raise_if_cancelled(self, url: Optional[str] = None) -> None:
        if self.is_cancelled:
            raise OperationCanceledError(url)

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"
