"""
API роутер финансового ассистента: потоковый ответ на текстовый запрос.
"""
import logging
from typing import AsyncIterator

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

import config
from request_context import RequestLogAdapter, request_logger
from schemas import Settings
from services.channel import FragmentChannel
from services.openai_svc import OpenAIService
from services.query_processor import stream_query

router = APIRouter(prefix="/api", tags=["assistant"])
logger = logging.getLogger(__name__)


def get_settings() -> Settings:
    return config.settings


# Клиент создаётся на каждый запрос; ошибка здесь завершает запрос с 500
def get_openai_service(settings: Settings = Depends(get_settings)) -> OpenAIService:
    logger.info("Шаг 0: подключение к Assistants API")
    return OpenAIService(settings)


async def _encode_fragments(
    query: str,
    log: RequestLogAdapter,
    service: OpenAIService,
    settings: Settings,
) -> AsyncIterator[bytes]:
    channel = FragmentChannel(settings.stream_buffer_size)
    try:
        async for fragment in stream_query(
            query, log, service=service, settings=settings, channel=channel
        ):
            if fragment:
                yield fragment.encode("utf-8")
    finally:
        if channel.failure is not None:
            log.warning(f"Ответ усечён: {channel.failure.model_dump_json()}")
        await service.close()


@router.post("/assistant")
async def assistant(
    request: Request,
    settings: Settings = Depends(get_settings),
    openai_service: OpenAIService = Depends(get_openai_service),
):
    """
    Потоковый ответ ассистента. Тело запроса - текст вопроса в UTF-8.
    """
    log = request_logger(__name__, request.headers.get("X-Request-ID"))
    log.info(f'Обработан запрос для url "{request.url}"')
    try:
        # некорректные байты заменяются на U+FFFD
        query = (await request.body()).decode("utf-8", errors="replace")
    except Exception:
        await openai_service.close()
        raise
    return StreamingResponse(
        _encode_fragments(query, log, openai_service, settings),
        headers={
            "Content-Type": "text/plain",
            "Transfer-Encoding": "chunked",
        },
    )
