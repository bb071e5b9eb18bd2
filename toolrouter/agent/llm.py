"""
Agent LLM: OpenAI chat completions for classification (with tools) and continuation (without).

Only this module talks to the OpenAI SDK. Callers get plain pydantic models back and
an LLMCallError when the completion cannot be obtained.
"""

import json
import logging
from typing import Any

import openai
from openai import OpenAI
from pydantic import BaseModel, Field

from toolrouter.core.config import LLM_API_TIMEOUT, OPENAI_LLM_MODEL
from toolrouter.core.errors import LLMCallError

logger = logging.getLogger(__name__)


class ToolInvocation(BaseModel):
    """One tool call requested by the model. `arguments` are untrusted."""

    id: str = ""
    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)
    raw_arguments: str = "{}"


class Classification(BaseModel):
    """Result of a completion with tools attached."""

    assistant_text: str | None = None
    tool_invocations: list[ToolInvocation] = Field(default_factory=list)

    def assistant_message(self) -> dict[str, Any]:
        """The assistant turn as it must be replayed in conversation history."""
        message: dict[str, Any] = {"role": "assistant", "content": self.assistant_text or ""}
        if self.tool_invocations:
            message["tool_calls"] = [
                {
                    "id": inv.id,
                    "type": "function",
                    "function": {"name": inv.name, "arguments": inv.raw_arguments},
                }
                for inv in self.tool_invocations
            ]
        return message


def build_client(api_key: str) -> OpenAI:
    """One client per request; retries are handled here, not by the SDK."""
    return OpenAI(api_key=api_key, timeout=LLM_API_TIMEOUT, max_retries=0)


def _create(client: Any, retries: int, **params: Any) -> Any:
    """Call chat.completions.create, retrying immediately up to `retries` times."""
    attempts = retries + 1
    for attempt in range(1, attempts + 1):
        try:
            response = client.chat.completions.create(model=OPENAI_LLM_MODEL, **params)
        except openai.APIError as e:
            logger.warning("[llm:create] attempt %d/%d failed: %s", attempt, attempts, e)
            if attempt == attempts:
                raise LLMCallError() from e
            continue
        msg = response.choices[0].message if response.choices else None
        if msg is None:
            logger.warning("[llm:create] attempt %d/%d returned no choices", attempt, attempts)
            if attempt == attempts:
                raise LLMCallError()
            continue
        return msg
    raise LLMCallError()


def _parse_tool_calls(raw_tool_calls: Any) -> list[ToolInvocation]:
    invocations = []
    for tc in raw_tool_calls or []:
        fn = getattr(tc, "function", None)
        if not fn:
            continue
        fname = getattr(fn, "name", None) or ""
        fargs = getattr(fn, "arguments", None) or "{}"
        try:
            args = json.loads(fargs) if isinstance(fargs, str) else dict(fargs)
        except (json.JSONDecodeError, TypeError, ValueError):
            logger.warning("[llm] tool=%s arguments are not valid JSON: %r", fname, fargs)
            args = {}
        if not isinstance(args, dict):
            args = {}
        raw = fargs if isinstance(fargs, str) else json.dumps(args)
        invocations.append(ToolInvocation(
            id=getattr(tc, "id", None) or "",
            name=fname,
            arguments=args,
            raw_arguments=raw,
        ))
    return invocations


def chat_with_tools(
    client: Any,
    messages: list[dict[str, Any]],
    tools: list[dict[str, Any]],
    retries: int = 0,
) -> Classification:
    """
    Completion with tools attached and tool_choice="auto".
    Returns the assistant text (if any) and the parsed tool invocations in model order.
    """
    logger.info("[llm:chat_with_tools] IN  messages=%d tools=%s", len(messages), [t["function"]["name"] for t in tools])
    msg = _create(client, retries, messages=messages, tools=tools, tool_choice="auto")
    content = (getattr(msg, "content", None) or "").strip() or None
    invocations = _parse_tool_calls(getattr(msg, "tool_calls", None))
    if invocations:
        logger.info("[llm:chat_with_tools] OUT tool_calls=%s", [inv.name for inv in invocations])
    if content:
        logger.info("[llm:chat_with_tools] OUT content_len=%d", len(content))
    return Classification(assistant_text=content, tool_invocations=invocations)


def chat(client: Any, messages: list[dict[str, Any]], retries: int = 0) -> str:
    """Completion with no tools attached. Returns the assistant text (may be empty)."""
    logger.info("[llm:chat] IN  messages=%d", len(messages))
    msg = _create(client, retries, messages=messages)
    out = (getattr(msg, "content", None) or "").strip()
    logger.info("[llm:chat] OUT response_len=%d", len(out))
    return out
