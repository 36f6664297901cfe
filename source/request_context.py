"""
Логирование в контексте одного HTTP-запроса.
"""
import logging
import uuid
from typing import Optional


class RequestLogAdapter(logging.LoggerAdapter):
    """Добавляет идентификатор запроса к каждому сообщению."""
    def process(self, msg, kwargs):
        return f"[{self.extra['request_id']}] {msg}", kwargs


def request_logger(name: str, request_id: Optional[str] = None) -> RequestLogAdapter:
    return RequestLogAdapter(
        logging.getLogger(name),
        {"request_id": request_id or uuid.uuid4().hex[:12]},
    )
