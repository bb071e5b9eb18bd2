"""
Shared fakes: OpenAI chat completion responses and recording httpx transports.
"""

import json
from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import MagicMock

import httpx
import pytest

from toolrouter.core.config import ProviderConfig

PROVIDER_URL = "https://api.langbase.test/beta/generate"


def completion(content: str | None = None, tool_calls: list | None = None) -> SimpleNamespace:
    """Shape of openai ChatCompletion as read by toolrouter.agent.llm."""
    message = SimpleNamespace(content=content, tool_calls=tool_calls)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def tool_call(call_id: str, name: str, arguments: dict[str, Any] | str) -> SimpleNamespace:
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return SimpleNamespace(id=call_id, type="function", function=SimpleNamespace(name=name, arguments=raw))


def fake_llm(*responses: Any) -> MagicMock:
    """Client whose chat.completions.create returns (or raises) `responses` in order."""
    client = MagicMock()
    client.chat.completions.create.side_effect = list(responses)
    return client


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


def provider_configs(**overrides: str) -> dict[str, ProviderConfig]:
    keys = {"sports": "key-sports", "electronics": "key-electronics", "travel": "key-travel"}
    keys.update(overrides)
    return {pid: ProviderConfig(url=PROVIDER_URL, api_key=key) for pid, key in keys.items()}


def bearer_token(request: httpx.Request) -> str:
    return request.headers["Authorization"].removeprefix("Bearer ")


def user_content(request: httpx.Request) -> str:
    return json.loads(request.content)["messages"][0]["content"]


@pytest.fixture
def events():
    """Collect ProviderCallEvents emitted during the test."""
    from toolrouter.core.events import subscribe, unsubscribe

    collected = []
    subscribe(collected.append)
    yield collected
    unsubscribe(collected.append)
