"""
Конфигурационный файл для сервиса финансового ассистента.
"""
import os

from dotenv import load_dotenv

from schemas import AssistantDefinition, Settings

load_dotenv()

# Логирование
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

# Настройки сервера
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))

ASSISTANT_NAME = "Finance Assistant"
ASSISTANT_INSTRUCTIONS = (
    "You are a personal finance assistant. "
    "Retrieve the latest closing price of a stock using its ticker symbol."
)

GET_STOCK_PRICE_TOOL = {
    "type": "function",
    "function": {
        "name": "getStockPrice",
        "description": "Retrieve the latest closing price of a stock using its ticker symbol.",
        "parameters": {
            "type": "object",
            "properties": {
                "symbol": {
                    "type": "string",
                    "description": "The ticker symbol of the stock",
                },
            },
            "required": ["symbol"],
        },
    },
}


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes")


def load_settings() -> Settings:
    """Читает окружение и собирает неизменяемые настройки сервиса."""
    return Settings(
        # пусто - ассистент создаётся на каждый запрос
        assistant_id=os.environ.get("ASSISTANT_ID") or None,
        assistant=AssistantDefinition(
            name=ASSISTANT_NAME,
            instructions=ASSISTANT_INSTRUCTIONS,
            tools=[GET_STOCK_PRICE_TOOL],
            model=os.environ.get("AZURE_DEPLOYMENT_NAME", "gpt-4o-mini"),
        ),
        azure_endpoint=os.environ.get("AZURE_OPENAI_ENDPOINT") or None,
        # пусто - авторизация через Entra ID (azure-identity)
        azure_api_key=os.environ.get("AZURE_OPENAI_API_KEY") or None,
        api_version=os.environ.get("OPENAI_API_VERSION", "2024-05-01-preview"),
        openai_api_key=os.environ.get("OPENAI_API_KEY") or None,
        openai_org_id=os.environ.get("OPENAI_ORG_ID") or None,
        max_tool_rounds=int(os.environ.get("MAX_TOOL_ROUNDS", "5")),
        stream_buffer_size=int(os.environ.get("STREAM_BUFFER_SIZE", "64")),
        cleanup_threads=_env_flag("CLEANUP_THREADS"),
    )


# Загружается один раз при старте процесса
settings = load_settings()
