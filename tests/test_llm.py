"""
Tests for the OpenAI adapter: tool-call parsing and retry policy.
"""

import httpx
import openai
import pytest

from conftest import completion, fake_llm, tool_call
from toolrouter.agent.llm import chat, chat_with_tools
from toolrouter.core.errors import LLMCallError

TOOLS = [{"type": "function", "function": {"name": "call_sports_dept", "parameters": {}}}]
MESSAGES = [{"role": "user", "content": "hi"}]


def _connection_error() -> openai.APIConnectionError:
    return openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))


def test_parses_tool_calls_in_order() -> None:
    client = fake_llm(completion(tool_calls=[
        tool_call("c1", "call_sports_dept", {"customerQuery": "a"}),
        tool_call("c2", "call_travel_dept", {"customerQuery": "b"}),
    ]))
    result = chat_with_tools(client, MESSAGES, TOOLS)
    assert [(i.id, i.name, i.arguments) for i in result.tool_invocations] == [
        ("c1", "call_sports_dept", {"customerQuery": "a"}),
        ("c2", "call_travel_dept", {"customerQuery": "b"}),
    ]
    assert result.assistant_text is None
    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["tool_choice"] == "auto"
    assert kwargs["tools"] == TOOLS


def test_invalid_argument_json_becomes_empty_arguments() -> None:
    client = fake_llm(completion(tool_calls=[tool_call("c1", "call_sports_dept", "{not json")]))
    [invocation] = chat_with_tools(client, MESSAGES, TOOLS).tool_invocations
    assert invocation.arguments == {}
    assert invocation.raw_arguments == "{not json"


def test_assistant_text_without_tools() -> None:
    client = fake_llm(completion(content="  We sell sports gear.  "))
    result = chat_with_tools(client, MESSAGES, TOOLS)
    assert result.assistant_text == "We sell sports gear."
    assert result.tool_invocations == []


def test_classification_retries_once_then_succeeds() -> None:
    client = fake_llm(_connection_error(), completion(content="ok"))
    assert chat_with_tools(client, MESSAGES, TOOLS, retries=1).assistant_text == "ok"
    assert client.chat.completions.create.call_count == 2


def test_classification_fails_after_one_retry() -> None:
    client = fake_llm(_connection_error(), _connection_error(), completion(content="never"))
    with pytest.raises(LLMCallError):
        chat_with_tools(client, MESSAGES, TOOLS, retries=1)
    assert client.chat.completions.create.call_count == 2


def test_chat_does_not_retry_and_sends_no_tools() -> None:
    client = fake_llm(_connection_error(), completion(content="unused"))
    with pytest.raises(LLMCallError):
        chat(client, MESSAGES)
    assert client.chat.completions.create.call_count == 1
    assert "tools" not in client.chat.completions.create.call_args.kwargs


def test_assistant_message_replays_tool_calls() -> None:
    client = fake_llm(completion(tool_calls=[tool_call("c9", "read_content", {"url": "https://example.com"})]))
    message = chat_with_tools(client, MESSAGES, TOOLS).assistant_message()
    assert message == {
        "role": "assistant",
        "content": "",
        "tool_calls": [{
            "id": "c9",
            "type": "function",
            "function": {"name": "read_content", "arguments": "{\"url\": \"https://example.com\"}"},
        }],
    }
