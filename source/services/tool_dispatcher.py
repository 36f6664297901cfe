"""
Диспетчер вызовов инструментов ассистента.
Вычисляет результаты инструментов, отправляет их и продолжает поток запуска.
"""
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List

from schemas import StreamFailure, ToolOutput
from services.channel import FragmentChannel
from services.events import pump_run_events
from services.openai_svc import OpenAIService
from services.stock_price import get_stock_price


class ToolDispatchError(Exception):
    """Ошибка обработки вызова инструментов."""


async def _get_stock_price_output(tool_call: Any) -> ToolOutput:
    symbol = json.loads(tool_call.function.arguments)["symbol"]
    return ToolOutput(tool_call_id=tool_call.id, output=await get_stock_price(symbol))


TOOL_HANDLERS: Dict[str, Callable[[Any], Awaitable[ToolOutput]]] = {
    "getStockPrice": _get_stock_price_output,
}


class ToolDispatcher:
    """Класс для обработки события thread.run.requires_action."""
    def __init__(
        self,
        service: OpenAIService,
        channel: FragmentChannel,
        log: logging.LoggerAdapter,
        max_tool_rounds: int = 5,
    ):
        self.service = service
        self.channel = channel
        self.log = log
        self.max_tool_rounds = max_tool_rounds

    async def resolve_tool_calls(self, tool_calls: List[Any]) -> List[Any]:
        """
        Результаты для всех вызовов, параллельно, в порядке вызовов.
        Вызовы неизвестных инструментов возвращаются без изменений.
        """
        return list(await asyncio.gather(*(self._resolve(call) for call in tool_calls)))

    async def _resolve(self, tool_call: Any) -> Any:
        handler = TOOL_HANDLERS.get(tool_call.function.name)
        if handler is None:
            return tool_call
        return await handler(tool_call)

    async def dispatch(self, run: Any, run_id: str, thread_id: str, depth: int = 0) -> bool:
        """
        Обрабатывает requires_action и пишет продолженный поток в канал.

        Ошибки не пробрасываются: они логируются и фиксируются в канале,
        возвращается False.
        """
        self.log.info(f"Обработка вызова инструментов (раунд {depth + 1})")
        try:
            if depth >= self.max_tool_rounds:
                raise ToolDispatchError(
                    f"Превышено число раундов вызова инструментов: {self.max_tool_rounds}"
                )
            tool_calls = run.required_action.submit_tool_outputs.tool_calls
            tool_outputs = await self.resolve_tool_calls(tool_calls)

            self.log.info("Отправка результатов инструментов и чтение потока")
            async with self.service.submit_tool_outputs_stream(
                thread_id, run_id, tool_outputs
            ) as stream:
                return await pump_run_events(
                    stream,
                    self.channel,
                    self.log,
                    lambda data: self.dispatch(data, data.id, data.thread_id, depth + 1),
                )
        except Exception as e:
            self.log.error(f"Ошибка при обработке вызова инструментов: {e}")
            self.channel.mark_failed(StreamFailure(
                stage="tool_dispatch",
                detail=str(e),
                run_id=run_id,
                thread_id=thread_id,
            ))
            return False
