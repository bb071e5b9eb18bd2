"""
Classifier/dispatcher for support-ticket routing.

classify: one completion with the department tools attached.
dispatch: run every selected tool (in parallel), normalize each reply, and merge
the ordered outcomes into a single answer. A failure in one tool only affects
that tool's line of the answer.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Literal

from pydantic import BaseModel, Field

from toolrouter.agent.llm import Classification, ToolInvocation, chat_with_tools
from toolrouter.agent.tools import (
    RequestClass,
    ToolDefinition,
    find_tool,
    get_registry,
    to_openai_tools,
    validate_arguments,
)
from toolrouter.core.config import CLASSIFY_MAX_RETRIES, MAX_TOOL_WORKERS
from toolrouter.core.errors import (
    InvalidToolArgumentsError,
    ProviderError,
    UnexpectedReplyShapeError,
)
from toolrouter.services.normalizer import TicketRecord, normalize
from toolrouter.services.provider_client import ProviderClient

logger = logging.getLogger(__name__)

SUPPORT_SYSTEM_PROMPT = (
    "You are a customer support assistant for TechBay, an online store that sells sports gear "
    "(including sports clothes), electronics and appliances, and travel bags and suitcases. "
    "Classify the customer query into one of these three categories and call the appropriate function."
)

NO_ANSWER_TEXT = "Sorry, I couldn't process your request."

OutcomeKind = Literal["ticket", "fallback", "degraded", "error", "skipped"]


class ToolOutcome(BaseModel):
    """Result of one tool invocation, keyed by its index in the model's response."""

    index: int
    tool_name: str
    label: str = ""
    kind: OutcomeKind
    text: str = ""
    ticket: TicketRecord | None = None

    @property
    def rendered(self) -> bool:
        return self.kind != "skipped"


class DispatchOutcome(BaseModel):
    answer: str
    outcomes: list[ToolOutcome] = Field(default_factory=list)

    @property
    def tools_used(self) -> list[str]:
        return [o.tool_name for o in self.outcomes if o.rendered]


def provider_error_text(error: ProviderError) -> str:
    return f"Error processing request: {error.message}, we are working on it please be patient"


def degraded_text(label: str) -> str:
    return f"We received an answer from the {label} but could not read it. Please try again later."


def merge_outcomes(outcomes: list[ToolOutcome]) -> str:
    """One line per rendered outcome, in invocation order. A single outcome is returned bare."""
    rendered = [o for o in sorted(outcomes, key=lambda o: o.index) if o.rendered]
    if not rendered:
        return NO_ANSWER_TEXT
    if len(rendered) == 1:
        return rendered[0].text
    return "\n".join(f"{o.label}: {o.text}" for o in rendered)


class TicketDispatcher:
    """Routes one customer query to TechBay department pipes. One instance per request."""

    def __init__(
        self,
        llm_client: Any,
        provider_client: ProviderClient,
        registry: tuple[ToolDefinition, ...] | None = None,
        max_workers: int = MAX_TOOL_WORKERS,
    ) -> None:
        self._llm = llm_client
        self._providers = provider_client
        self._registry = registry or get_registry(RequestClass.SUPPORT_TICKET)
        self._max_workers = max_workers

    def classify(self, query: str) -> Classification:
        messages = [
            {"role": "system", "content": SUPPORT_SYSTEM_PROMPT},
            {"role": "user", "content": query},
        ]
        return chat_with_tools(
            self._llm,
            messages,
            to_openai_tools(self._registry),
            retries=CLASSIFY_MAX_RETRIES,
        )

    def _run_one(self, index: int, invocation: ToolInvocation, tool: ToolDefinition) -> ToolOutcome:
        base = {"index": index, "tool_name": tool.name, "label": tool.label}
        try:
            args = validate_arguments(tool, invocation.arguments)
        except InvalidToolArgumentsError as e:
            logger.warning("[dispatcher] skip index=%d: %s", index, e.message)
            return ToolOutcome(kind="skipped", text=e.message, **base)
        try:
            raw = self._providers.invoke(tool.provider_id, str(args["customerQuery"]))
        except ProviderError as e:
            logger.warning("[dispatcher] index=%d tool=%s provider error: %s", index, tool.name, e.message)
            return ToolOutcome(kind="error", text=provider_error_text(e), **base)
        try:
            normalized = normalize(raw)
        except UnexpectedReplyShapeError:
            logger.warning("[dispatcher] index=%d tool=%s unexpected reply shape: %r", index, tool.name, raw)
            return ToolOutcome(kind="degraded", text=degraded_text(tool.label.lower()), **base)
        if isinstance(normalized, TicketRecord):
            return ToolOutcome(kind="ticket", text=normalized.render(), ticket=normalized, **base)
        return ToolOutcome(kind="fallback", text=normalized.render(), **base)

    def dispatch(self, invocations: list[ToolInvocation]) -> DispatchOutcome:
        """Execute every known invocation; unknown tool names are dropped."""
        jobs: list[tuple[int, ToolInvocation, ToolDefinition]] = []
        for index, invocation in enumerate(invocations):
            tool = find_tool(self._registry, invocation.name)
            if tool is None:
                logger.warning("[dispatcher] drop unknown tool index=%d name=%r", index, invocation.name)
                continue
            jobs.append((index, invocation, tool))
        logger.info("[dispatcher:dispatch] IN  invocations=%d executable=%d", len(invocations), len(jobs))
        if not jobs:
            return DispatchOutcome(answer=NO_ANSWER_TEXT)

        with ThreadPoolExecutor(max_workers=max(1, min(self._max_workers, len(jobs)))) as pool:
            outcomes = list(pool.map(lambda job: self._run_one(*job), jobs))

        answer = merge_outcomes(outcomes)
        logger.info("[dispatcher:dispatch] OUT kinds=%s", [o.kind for o in outcomes])
        return DispatchOutcome(answer=answer, outcomes=outcomes)

    def run(self, query: str) -> DispatchOutcome:
        """
        Classify then dispatch. When the model selects no tool, its own text is the
        answer; classification is not retried and no default department is forced.
        """
        classification = self.classify(query)
        if not classification.tool_invocations:
            return DispatchOutcome(answer=classification.assistant_text or NO_ANSWER_TEXT)
        return self.dispatch(classification.tool_invocations)
