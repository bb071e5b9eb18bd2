"""
LangGraph continuation flow for web summarization: classify → read_content → final_answer.

classify attaches the read_content tool. If the model answers directly, that text is
final and no second completion is made. Otherwise the assistant tool-call message
and one tool-result message per call are appended to the history (awaiting tool
result), and a second completion runs over the full history with no tools attached
(awaiting final answer), so the model cannot call further tools.
History lives in the graph state and is discarded when the request ends.
"""

import logging
from typing import Any, Callable, Literal, TypedDict

from langgraph.graph import END, StateGraph
from pydantic import BaseModel, Field

from toolrouter.agent.llm import Classification, chat, chat_with_tools
from toolrouter.agent.tools import RequestClass, find_tool, get_registry, to_openai_tools, validate_arguments
from toolrouter.core.config import CLASSIFY_MAX_RETRIES
from toolrouter.core.errors import ContentFetchError, InvalidToolArgumentsError, MissingQueryError
from toolrouter.services.web_content import read_content

logger = logging.getLogger(__name__)

SUMMARY_SYSTEM_PROMPT = (
    "You are a helpful assistant. When the user asks about or wants a summary of a web page, "
    "call read_content with the page URL, then answer using only the text it returns. "
    "Keep summaries short and in plain language."
)

NO_ANSWER_TEXT = "Sorry, I couldn't process your request."

Fetcher = Callable[[str], str]


class SummaryState(TypedDict):
    message: str
    history: list  # role-tagged chat messages, append-only
    classification: Classification | None
    answer: str
    tools_used: list
    stage: str


class SummaryOutcome(BaseModel):
    answer: str
    history: list[dict[str, Any]] = Field(default_factory=list)
    tools_used: list[str] = Field(default_factory=list)


def _tool_result(invocation, fetch: Fetcher) -> tuple[str, bool]:
    """Run one read_content call. Returns (content for the tool message, executed)."""
    tool = find_tool(get_registry(RequestClass.WEB_SUMMARY), invocation.name)
    if tool is None:
        logger.warning("[graph:read_content] drop unknown tool name=%r", invocation.name)
        return f"Unknown tool: {invocation.name}", False
    try:
        args = validate_arguments(tool, invocation.arguments)
        return fetch(str(args["url"])), True
    except InvalidToolArgumentsError as e:
        logger.warning("[graph:read_content] invalid arguments: %s", e.message)
        return f"Error: {tool.name} needs an absolute http(s) url.", False
    except ContentFetchError as e:
        logger.warning("[graph:read_content] fetch failed: %s (%s)", e.message, e.detail)
        return e.message, True


def build_graph(llm_client: Any, fetch: Fetcher | None = None):
    """
    Build and compile the continuation graph.
    classify → (read_content → final_answer | END) → END.
    `fetch` defaults to the web content fetcher.
    """
    fetch = fetch or read_content

    def _classify(state: SummaryState) -> dict:
        message = state["message"]
        logger.info("[graph:classify] IN  message=%r", message)
        history = [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": message},
        ]
        classification = chat_with_tools(
            llm_client,
            history,
            to_openai_tools(get_registry(RequestClass.WEB_SUMMARY)),
            retries=CLASSIFY_MAX_RETRIES,
        )
        if not classification.tool_invocations:
            logger.info("[graph:classify] OUT no tool call; answering directly")
            return {
                "history": history,
                "classification": classification,
                "answer": classification.assistant_text or NO_ANSWER_TEXT,
                "stage": "done",
            }
        logger.info("[graph:classify] OUT tool_calls=%d", len(classification.tool_invocations))
        return {"history": history, "classification": classification, "stage": "awaiting_tool_result"}

    def _read_content(state: SummaryState) -> dict:
        classification = state["classification"]
        history = list(state["history"])
        history.append(classification.assistant_message())
        tools_used = list(state.get("tools_used") or [])
        for invocation in classification.tool_invocations:
            content, executed = _tool_result(invocation, fetch)
            if executed:
                tools_used.append(invocation.name)
            history.append({"role": "tool", "tool_call_id": invocation.id, "content": content})
        logger.info("[graph:read_content] OUT history_len=%d tools_used=%s", len(history), tools_used)
        return {"history": history, "tools_used": tools_used, "stage": "awaiting_final_answer"}

    def _final_answer(state: SummaryState) -> dict:
        answer = chat(llm_client, state["history"])
        logger.info("[graph:final_answer] OUT answer_len=%d", len(answer))
        return {"answer": answer or NO_ANSWER_TEXT, "stage": "done"}

    def _route_after_classify(state: SummaryState) -> Literal["read_content", "__end__"]:
        return "read_content" if state.get("stage") == "awaiting_tool_result" else END

    graph = StateGraph(SummaryState)
    graph.add_node("classify", _classify)
    graph.add_node("read_content", _read_content)
    graph.add_node("final_answer", _final_answer)

    graph.set_entry_point("classify")
    graph.add_conditional_edges("classify", _route_after_classify)
    graph.add_edge("read_content", "final_answer")
    graph.add_edge("final_answer", END)

    return graph.compile()


def run_summary(llm_client: Any, message: str, fetch: Fetcher | None = None) -> SummaryOutcome:
    """Run the continuation flow for one request."""
    if not message or not str(message).strip():
        raise MissingQueryError("message")
    initial: SummaryState = {
        "message": str(message).strip(),
        "history": [],
        "classification": None,
        "answer": "",
        "tools_used": [],
        "stage": "start",
    }
    final = build_graph(llm_client, fetch).invoke(initial)
    answer = (final.get("answer") or "").strip() or NO_ANSWER_TEXT
    logger.info("[run_summary] END tools_used=%s answer_len=%d", final.get("tools_used"), len(answer))
    return SummaryOutcome(
        answer=answer,
        history=list(final.get("history") or []),
        tools_used=list(final.get("tools_used") or []),
    )
