"""
Сервис для работы с Assistants API (OpenAI или Azure OpenAI).
"""
import logging
from typing import Any, List, Optional

from azure.identity.aio import DefaultAzureCredential, get_bearer_token_provider
from openai import AsyncAzureOpenAI, AsyncOpenAI

from schemas import AssistantDefinition, Settings

logger = logging.getLogger(__name__)

AZURE_COGNITIVE_SCOPE = "https://cognitiveservices.azure.com/.default"


class OpenAIService:
    """Класс для работы с OpenAI API."""
    def __init__(self, settings: Settings):
        self._credential: Optional[DefaultAzureCredential] = None
        if settings.azure_endpoint:
            if settings.azure_api_key:
                logger.info("Используем Azure OpenAI (ключ API)")
                self.client = AsyncAzureOpenAI(
                    azure_endpoint=settings.azure_endpoint,
                    api_key=settings.azure_api_key,
                    api_version=settings.api_version,
                    max_retries=0,
                )
            else:
                logger.info("Используем Azure OpenAI (Microsoft Entra ID)")
                self._credential = DefaultAzureCredential()
                self.client = AsyncAzureOpenAI(
                    azure_endpoint=settings.azure_endpoint,
                    azure_ad_token_provider=get_bearer_token_provider(
                        self._credential, AZURE_COGNITIVE_SCOPE
                    ),
                    api_version=settings.api_version,
                    max_retries=0,
                )
        else:
            logger.info("Используем OpenAI")
            self.client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                organization=settings.openai_org_id,
                max_retries=0,
            )
    async def retrieve_assistant(self, assistant_id: str) -> Any:
        try:
            return await self.client.beta.assistants.retrieve(assistant_id)
        except Exception as e:
            logger.error(f"Ошибка при получении ассистента {assistant_id}: {e}")
            raise
    async def create_assistant(self, definition: AssistantDefinition) -> Any:
        try:
            return await self.client.beta.assistants.create(**definition.model_dump())
        except Exception as e:
            logger.error(f"Ошибка при создании ассистента {definition.name}: {e}")
            raise
    async def create_thread(self) -> Any:
        try:
            return await self.client.beta.threads.create()
        except Exception as e:
            logger.error(f"Ошибка при создании треда: {e}")
            raise
    async def add_message(self, thread_id: str, role: str, content: str) -> Any:
        try:
            message = await self.client.beta.threads.messages.create(
                thread_id=thread_id,
                role=role,
                content=content
            )
            return message
        except Exception as e:
            logger.error(f"Ошибка при добавлении сообщения в тред {thread_id}: {e}")
            raise
    def stream_run(self, thread_id: str, assistant_id: str) -> Any:
        """
        Запуск треда в потоковом режиме.
        Возвращает async context manager; события читаются через `async for`.
        """
        return self.client.beta.threads.runs.stream(
            thread_id=thread_id,
            assistant_id=assistant_id,
        )
    def submit_tool_outputs_stream(self, thread_id: str, run_id: str, tool_outputs: List[Any]) -> Any:
        """Отправка результатов инструментов одним вызовом; продолжает поток запуска."""
        return self.client.beta.threads.runs.submit_tool_outputs_stream(
            thread_id=thread_id,
            run_id=run_id,
            tool_outputs=[_as_payload(output) for output in tool_outputs],
        )
    async def delete_thread(self, thread_id: str) -> None:
        try:
            await self.client.beta.threads.delete(thread_id)
        except Exception as e:
            logger.warning(f"Не удалось удалить тред {thread_id}: {e}")
    async def close(self) -> None:
        await self.client.close()
        if self._credential is not None:
            await self._credential.close()


def _as_payload(output: Any) -> Any:
    # Нераспознанные вызовы передаются как есть, модели SDK сериализуются в dict
    if hasattr(output, "model_dump"):
        return output.model_dump(exclude_none=True)
    return output
