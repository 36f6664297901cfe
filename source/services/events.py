"""
Типы событий потока запуска и их разбор.
"""
import logging
from typing import Any, Awaitable, Callable, Optional

from services.channel import FragmentChannel

MESSAGE_DELTA = "thread.message.delta"
RUN_REQUIRES_ACTION = "thread.run.requires_action"


def extract_delta_text(data: Any) -> Optional[str]:
    """
    Текст первого блока содержимого дельты.

    None - в событии нет дельты (фрагмент не выдаётся),
    пустая строка - дельта есть, но текста в первом блоке нет.
    """
    delta = getattr(data, "delta", None)
    if not delta:
        return None
    content = getattr(delta, "content", None) or []
    if not content:
        return ""
    text = getattr(content[0], "text", None)
    return getattr(text, "value", None) or ""


async def pump_run_events(
    stream: Any,
    channel: FragmentChannel,
    log: logging.LoggerAdapter,
    on_requires_action: Callable[[Any], Awaitable[bool]],
) -> bool:
    """
    Читает события запуска: текст дельт пишет в канал, requires_action
    передаёт обработчику. Остальные события пропускаются.

    Возвращает False, если обработчик инструментов сообщил о сбое;
    чтение потока при этом прекращается.
    """
    async for event in stream:
        if event.event == MESSAGE_DELTA:
            value = extract_delta_text(event.data)
            if value is None:
                continue
            await channel.send(value)
            log.debug(f"Обработан {MESSAGE_DELTA}: {value!r}")
        elif event.event == RUN_REQUIRES_ACTION:
            if not await on_requires_action(event.data):
                return False
        # остальные события пока не обрабатываются
    return True
