"""
Tool registry: the fixed catalog of callable tools shown to the LLM.

Two request classes, each with a static registry:
- support ticket routing: one tool per TechBay department (disjoint scopes)
- web summarization: read_content
Descriptions are the only signal the model uses to pick a tool, so department
scopes must not overlap.
"""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from toolrouter.core.errors import InvalidToolArgumentsError

logger = logging.getLogger(__name__)


class RequestClass(str, Enum):
    SUPPORT_TICKET = "support_ticket"
    WEB_SUMMARY = "web_summary"


class ToolParameter(BaseModel):
    type: str = "string"
    description: str
    required: bool = True


class ToolDefinition(BaseModel):
    """One callable tool. `provider_id` names the capability provider it routes to."""

    name: str
    description: str
    parameters: dict[str, ToolParameter] = Field(default_factory=dict)
    provider_id: str
    label: str

    model_config = {"frozen": True}

    def to_openai(self) -> dict[str, Any]:
        """OpenAI function-calling format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        name: {"type": p.type, "description": p.description}
                        for name, p in self.parameters.items()
                    },
                    "required": [name for name, p in self.parameters.items() if p.required],
                },
            },
        }


SUPPORT_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="call_sports_dept",
        description="Call this function for queries related to sports gear and clothes",
        parameters={
            "customerQuery": ToolParameter(description="The customer query related to sports gear"),
        },
        provider_id="sports",
        label="Sports department",
    ),
    ToolDefinition(
        name="call_electronics_dept",
        description="Call this function for queries related to electronics and appliances",
        parameters={
            "customerQuery": ToolParameter(description="The customer query related to electronics and appliances"),
        },
        provider_id="electronics",
        label="Electronics department",
    ),
    ToolDefinition(
        name="call_travel_dept",
        description="Call this function for queries related to travel bags and suitcases",
        parameters={
            "customerQuery": ToolParameter(description="The customer query related to travel bags and suitcases"),
        },
        provider_id="travel",
        label="Travel department",
    ),
)

WEB_TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="read_content",
        description="Fetch a web page and return its readable paragraph text. Call this when the user asks about, or to summarize, the content of a URL.",
        parameters={
            "url": ToolParameter(description="Absolute http(s) URL of the page to read"),
        },
        provider_id="web_content",
        label="Web page",
    ),
)

_REGISTRIES: dict[RequestClass, tuple[ToolDefinition, ...]] = {
    RequestClass.SUPPORT_TICKET: SUPPORT_TOOLS,
    RequestClass.WEB_SUMMARY: WEB_TOOLS,
}


def get_registry(request_class: RequestClass) -> tuple[ToolDefinition, ...]:
    """Ordered tool definitions for a request class."""
    return _REGISTRIES[request_class]


def to_openai_tools(registry: tuple[ToolDefinition, ...]) -> list[dict[str, Any]]:
    return [tool.to_openai() for tool in registry]


def find_tool(registry: tuple[ToolDefinition, ...], name: str) -> ToolDefinition | None:
    """Resolve a tool by exact name; None when the name is not in this registry."""
    for tool in registry:
        if tool.name == name:
            return tool
    return None


def validate_arguments(tool: ToolDefinition, arguments: dict[str, Any] | None) -> dict[str, Any]:
    """
    Check that every required argument is present and non-blank.
    Returns the arguments restricted to the tool's declared parameters.
    """
    args = arguments if isinstance(arguments, dict) else {}
    missing = []
    for name, param in tool.parameters.items():
        if not param.required:
            continue
        value = args.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        logger.warning("[tools:validate_arguments] tool=%s missing=%s", tool.name, missing)
        raise InvalidToolArgumentsError(tool.name, missing)
    return {name: args[name] for name in tool.parameters if name in args}
