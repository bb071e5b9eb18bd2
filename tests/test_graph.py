"""
Tests for the web summarization continuation flow.
"""

from unittest.mock import patch

import httpx
import openai
import pytest

from conftest import completion, fake_llm, tool_call
from toolrouter.agent.graph import NO_ANSWER_TEXT, SUMMARY_SYSTEM_PROMPT, run_summary
from toolrouter.agent.tools import RequestClass, get_registry
from toolrouter.core.errors import ContentFetchError, LLMCallError, MissingQueryError

URL = "https://example.com/article"


class FakeFetcher:
    def __init__(self, text: str = "Paragraph one.\n\nParagraph two.", error: Exception | None = None) -> None:
        self.text = text
        self.error = error
        self.urls: list[str] = []

    def __call__(self, url: str) -> str:
        self.urls.append(url)
        if self.error:
            raise self.error
        return self.text


def test_summarize_appends_tool_result_and_continues_without_tools() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {"url": URL})]),
        completion(content="The article says two things."),
    )
    fetch = FakeFetcher()

    outcome = run_summary(llm, f"Summarize {URL}", fetch=fetch)

    assert outcome.answer == "The article says two things."
    assert outcome.tools_used == ["read_content"]
    assert fetch.urls == [URL]
    assert [m["role"] for m in outcome.history] == ["system", "user", "assistant", "tool"]
    assert outcome.history[0]["content"] == SUMMARY_SYSTEM_PROMPT
    assert outcome.history[1]["content"] == f"Summarize {URL}"
    assert outcome.history[2]["tool_calls"][0]["function"]["name"] == "read_content"
    assert outcome.history[3] == {"role": "tool", "tool_call_id": "call_1", "content": "Paragraph one.\n\nParagraph two."}

    first, second = llm.chat.completions.create.call_args_list
    assert first.kwargs["tools"][0]["function"]["name"] == "read_content"
    assert "tools" not in second.kwargs
    assert second.kwargs["messages"] == outcome.history


def test_no_tool_call_short_circuits() -> None:
    llm = fake_llm(completion(content="Please send me a link to summarize."))
    fetch = FakeFetcher()
    outcome = run_summary(llm, "Summarize", fetch=fetch)
    assert outcome.answer == "Please send me a link to summarize."
    assert llm.chat.completions.create.call_count == 1
    assert fetch.urls == []
    assert [m["role"] for m in outcome.history] == ["system", "user"]


def test_fetch_failure_is_reported_to_the_model() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {"url": URL})]),
        completion(content="I could not open that page."),
    )
    fetch = FakeFetcher(error=ContentFetchError(URL, "the page returned status 404"))
    outcome = run_summary(llm, f"Summarize {URL}", fetch=fetch)
    assert outcome.answer == "I could not open that page."
    assert outcome.history[3]["content"] == f"Could not read content from {URL}: the page returned status 404"


def test_missing_url_argument_is_not_fetched() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {})]),
        completion(content="Which page?"),
    )
    fetch = FakeFetcher()
    outcome = run_summary(llm, "Summarize it", fetch=fetch)
    assert fetch.urls == []
    assert outcome.tools_used == []
    assert outcome.history[3]["role"] == "tool"
    assert outcome.answer == "Which page?"


def test_unknown_tool_gets_a_tool_message_but_is_not_executed() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "run_shell", {"cmd": "ls"})]),
        completion(content="Done."),
    )
    fetch = FakeFetcher()
    outcome = run_summary(llm, "Summarize", fetch=fetch)
    assert fetch.urls == []
    assert outcome.history[3] == {"role": "tool", "tool_call_id": "call_1", "content": "Unknown tool: run_shell"}


def test_empty_final_answer_falls_back() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {"url": URL})]),
        completion(content=""),
    )
    assert run_summary(llm, f"Summarize {URL}", fetch=FakeFetcher()).answer == NO_ANSWER_TEXT


def test_continuation_failure_is_not_retried() -> None:
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {"url": URL})]),
        error,
        completion(content="never reached"),
    )
    with pytest.raises(LLMCallError):
        run_summary(llm, f"Summarize {URL}", fetch=FakeFetcher())
    assert llm.chat.completions.create.call_count == 2


def test_blank_message_rejected() -> None:
    with pytest.raises(MissingQueryError):
        run_summary(fake_llm(), "   ")


def test_tools_come_from_the_web_summary_registry() -> None:
    llm = fake_llm(
        completion(tool_calls=[tool_call("call_1", "read_content", {"url": URL})]),
        completion(content="Summary."),
    )
    with patch("toolrouter.agent.graph.get_registry", wraps=get_registry) as registry:
        run_summary(llm, f"Summarize {URL}", fetch=FakeFetcher())
    assert registry.call_args_list and all(
        c.args == (RequestClass.WEB_SUMMARY,) for c in registry.call_args_list
    )
    first = llm.chat.completions.create.call_args_list[0]
    assert [t["function"]["name"] for t in first.kwargs["tools"]] == ["read_content"]
