"""Shared fakes for the Assistants API stream."""

from types import SimpleNamespace
from typing import Any, List, Optional

import pytest

import config
from request_context import request_logger
from schemas import Settings
from services.channel import FragmentChannel
from services.events import MESSAGE_DELTA, RUN_REQUIRES_ACTION


def text_delta(value: Optional[str]) -> SimpleNamespace:
    block = SimpleNamespace(type="text", text=SimpleNamespace(value=value))
    return SimpleNamespace(event=MESSAGE_DELTA, data=SimpleNamespace(delta=SimpleNamespace(content=[block])))


def run_event(name: str) -> SimpleNamespace:
    return SimpleNamespace(event=name, data=SimpleNamespace(id="run_1", thread_id="thread_1"))


def tool_call(call_id: str, name: str, arguments: str) -> SimpleNamespace:
    return SimpleNamespace(id=call_id, type="function", function=SimpleNamespace(name=name, arguments=arguments))


def requires_action(tool_calls: List[Any], run_id: str = "run_1", thread_id: str = "thread_1") -> SimpleNamespace:
    data = SimpleNamespace(
        id=run_id,
        thread_id=thread_id,
        required_action=SimpleNamespace(submit_tool_outputs=SimpleNamespace(tool_calls=tool_calls)),
    )
    return SimpleNamespace(event=RUN_REQUIRES_ACTION, data=data)


class FakeStream:
    """Async context manager + async iterator, like the SDK stream managers."""

    def __init__(self, events: List[Any], error: Optional[Exception] = None):
        self.events = events
        self.error = error

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return False

    async def __aiter__(self):
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error


class FakeOpenAIService:
    """In-memory stand-in for OpenAIService recording every call."""

    def __init__(self, run_events=None, resumed=None, submit_error=None):
        self.run_events = run_events or []
        # Each item: list of events or a FakeStream
        self.resumed = list(resumed or [])
        self.submit_error = submit_error
        self.calls: List[tuple] = []
        self.submitted: List[tuple] = []
        self.deleted: List[str] = []
        self.closed = False

    async def retrieve_assistant(self, assistant_id):
        self.calls.append(("retrieve_assistant", assistant_id))
        return SimpleNamespace(id=assistant_id)

    async def create_assistant(self, definition):
        self.calls.append(("create_assistant", definition.name))
        return SimpleNamespace(id="asst_created")

    async def create_thread(self):
        self.calls.append(("create_thread",))
        return SimpleNamespace(id="thread_1")

    async def add_message(self, thread_id, role, content):
        self.calls.append(("add_message", thread_id, role, content))
        return SimpleNamespace(id="msg_1")

    def stream_run(self, thread_id, assistant_id):
        self.calls.append(("stream_run", thread_id, assistant_id))
        if isinstance(self.run_events, FakeStream):
            return self.run_events
        return FakeStream(self.run_events)

    def submit_tool_outputs_stream(self, thread_id, run_id, tool_outputs):
        self.submitted.append((thread_id, run_id, list(tool_outputs)))
        if self.submit_error is not None:
            raise self.submit_error
        nxt = self.resumed.pop(0) if self.resumed else []
        return nxt if isinstance(nxt, FakeStream) else FakeStream(nxt)

    async def delete_thread(self, thread_id):
        self.deleted.append(thread_id)

    async def close(self):
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return config.load_settings().model_copy(
        update={"assistant_id": None, "cleanup_threads": False, "max_tool_rounds": 5, "stream_buffer_size": 0}
    )


@pytest.fixture
def log():
    return request_logger("tests", "test-request")


@pytest.fixture
def channel() -> FragmentChannel:
    return FragmentChannel()


async def drain(channel: FragmentChannel) -> List[str]:
    await channel.close()
    return [fragment async for fragment in channel]
