"""
Обработка запроса пользователя: ассистент, тред, потоковый запуск.
"""
import asyncio
import logging
from typing import AsyncIterator, Optional

from schemas import Settings
from services.channel import FragmentChannel
from services.events import pump_run_events
from services.openai_svc import OpenAIService
from services.tool_dispatcher import ToolDispatcher


async def process_query(
    query: str,
    log: logging.LoggerAdapter,
    *,
    service: OpenAIService,
    settings: Settings,
    channel: FragmentChannel,
) -> None:
    """
    Пишет в канал фрагменты ответа ассистента на запрос.

    Фрагменты из продолженного после вызова инструментов потока попадают
    в тот же канал до чтения следующих событий внешнего потока.
    Ошибки, кроме ошибок обработки инструментов, пробрасываются.
    """
    log.info("Шаг 1: получение или создание ассистента")
    if settings.assistant_id:
        assistant = await service.retrieve_assistant(settings.assistant_id)
    else:
        assistant = await service.create_assistant(settings.assistant)

    log.info("Шаг 2: создание треда")
    thread = await service.create_thread()

    try:
        log.info("Шаг 3: добавление сообщения в тред")
        await service.add_message(thread.id, "user", query)

        dispatcher = ToolDispatcher(service, channel, log, settings.max_tool_rounds)

        log.info("Шаг 4: запуск треда в потоковом режиме")
        async with service.stream_run(thread.id, assistant.id) as stream:
            log.info("Шаг 5: чтение потока ответа")
            completed = await pump_run_events(
                stream,
                channel,
                log,
                lambda data: dispatcher.dispatch(data, data.id, data.thread_id),
            )
        if not completed:
            log.warning("Поток ответа прерван после ошибки вызова инструментов")
        log.info("Готово")
    finally:
        if settings.cleanup_threads:
            await service.delete_thread(thread.id)


async def stream_query(
    query: str,
    log: logging.LoggerAdapter,
    *,
    service: OpenAIService,
    settings: Settings,
    channel: Optional[FragmentChannel] = None,
) -> AsyncIterator[str]:
    """
    Запускает process_query в отдельной задаче и выдаёт фрагменты из канала.
    Если потребитель прекращает чтение, задача отменяется.
    """
    if channel is None:
        channel = FragmentChannel(settings.stream_buffer_size)

    async def produce() -> None:
        try:
            await process_query(
                query, log, service=service, settings=settings, channel=channel
            )
        except Exception as e:
            log.error(f"Ошибка при обработке запроса: {e}")
            await channel.close(error=e)
        else:
            await channel.close()

    task = asyncio.create_task(produce())
    try:
        async for fragment in channel:
            yield fragment
    finally:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
