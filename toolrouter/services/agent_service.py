"""
Agent service: build the per-request clients and run one orchestration flow.

One entry point per flow. Each call checks the OpenAI credential and the input,
builds fresh clients from config, runs ticket routing or web summarization, and
returns the outcome. The API layer is the only caller.
Nothing is shared between requests.
"""

import logging

from toolrouter.agent.dispatcher import DispatchOutcome, TicketDispatcher
from toolrouter.agent.graph import SummaryOutcome, run_summary
from toolrouter.agent.llm import build_client
from toolrouter.core import config
from toolrouter.core.errors import MissingCredentialError, MissingQueryError
from toolrouter.services.provider_client import ProviderClient

logger = logging.getLogger(__name__)


def require_llm_credential() -> str:
    """Return the OpenAI key or raise MissingCredentialError before any call is made."""
    if not config.OPENAI_API_KEY:
        raise MissingCredentialError("OPENAI_API_KEY")
    return config.OPENAI_API_KEY


def build_provider_client() -> ProviderClient:
    return ProviderClient(config.provider_configs())


def route_ticket(query: str) -> DispatchOutcome:
    """Classify a customer query and dispatch it to the matching department pipe(s)."""
    api_key = require_llm_credential()
    if not query or not query.strip():
        raise MissingQueryError("query")
    q = query.strip()
    logger.info("[agent_service:route_ticket] START query=%r", q)
    dispatcher = TicketDispatcher(build_client(api_key), build_provider_client())
    outcome = dispatcher.run(q)
    logger.info("[agent_service:route_ticket] END tools_used=%s answer_len=%d", outcome.tools_used, len(outcome.answer))
    return outcome


def summarize(message: str) -> SummaryOutcome:
    """Answer a message that may reference a web page, fetching it when the model asks."""
    api_key = require_llm_credential()
    if not message or not message.strip():
        raise MissingQueryError("message")
    logger.info("[agent_service:summarize] START message=%r", message.strip())
    return run_summary(build_client(api_key), message)
