"""
Канал фрагментов ответа между продюсером (обработчик запроса) и потребителем (HTTP-ответ).
"""
import asyncio
from typing import AsyncIterator, Optional

from schemas import StreamFailure

_CLOSED = object()


class FragmentChannel:
    """
    Упорядоченный канал текстовых фрагментов.

    Обработчик запроса и диспетчер инструментов пишут в один и тот же канал,
    поэтому фрагменты выходят строго в порядке записи.
    """
    def __init__(self, maxsize: int = 0):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize)
        self._closed = False
        self._error: Optional[BaseException] = None
        self.failure: Optional[StreamFailure] = None

    @property
    def closed(self) -> bool:
        return self._closed

    async def send(self, fragment: str) -> None:
        if self._closed:
            raise RuntimeError("Канал уже закрыт")
        await self._queue.put(fragment)

    def mark_failed(self, failure: StreamFailure) -> None:
        """Фиксирует сбой обработки инструментов; потребитель не получает исключения."""
        self.failure = failure

    async def close(self, error: Optional[BaseException] = None) -> None:
        if self._closed:
            return
        self._closed = True
        self._error = error
        await self._queue.put(_CLOSED)

    async def __aiter__(self) -> AsyncIterator[str]:
        while True:
            item = await self._queue.get()
            if item is _CLOSED:
                if self._error is not None:
                    raise self._error
                return
            yield item
