"""
Схемы данных для сервиса финансового ассистента.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any


class AssistantDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    instructions: str
    tools: List[Dict[str, Any]] = Field(default_factory=list)
    model: str


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True)

    assistant_id: Optional[str] = None
    assistant: AssistantDefinition
    azure_endpoint: Optional[str] = None
    azure_api_key: Optional[str] = None
    api_version: str = "2024-05-01-preview"
    openai_api_key: Optional[str] = None
    openai_org_id: Optional[str] = None
    max_tool_rounds: int = Field(default=5, ge=1)
    stream_buffer_size: int = Field(default=64, ge=0)
    cleanup_threads: bool = False


class ToolOutput(BaseModel):
    tool_call_id: str
    output: str


class StreamFailure(BaseModel):
    """Терминальная отметка потока: обработка вызова инструмента не удалась."""
    stage: str
    detail: str
    run_id: Optional[str] = None
    thread_id: Optional[str] = None
