"""
Turns agent_service results into FastAPI responses.

OrchestratorError subclasses become HTTP statuses here: plain text for the HTML
pages, HTTPException detail for the JSON endpoints.
"""

import logging

from fastapi import HTTPException
from fastapi.responses import HTMLResponse, PlainTextResponse, Response

from toolrouter.core.errors import (
    LLMCallError,
    MissingCredentialError,
    MissingQueryError,
    OrchestratorError,
)
from toolrouter.schemas.query import QueryResponse, ToolOutcomeOut
from toolrouter.services import agent_service
from toolrouter.services.rendering import render_page

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[OrchestratorError], int] = {
    MissingQueryError: 400,
    MissingCredentialError: 500,
    LLMCallError: 502,
}


def status_for(error: OrchestratorError) -> int:
    for error_type, status in _STATUS_CODES.items():
        if isinstance(error, error_type):
            return status
    return 500


def handle_ticket_page(query: str | None) -> Response:
    """GET /?query=... -> HTML page, or a plain-text error with the mapped status."""
    try:
        outcome = agent_service.route_ticket(query or "")
    except OrchestratorError as e:
        logger.warning("[handlers:ticket_page] %s: %s", type(e).__name__, e.message)
        return PlainTextResponse(e.message, status_code=status_for(e))
    return HTMLResponse(render_page(query or "", outcome.answer))


def handle_summary_page(message: str | None) -> Response:
    """GET /summarize?message=... -> HTML page, or a plain-text error."""
    try:
        outcome = agent_service.summarize(message or "")
    except OrchestratorError as e:
        logger.warning("[handlers:summary_page] %s: %s", type(e).__name__, e.message)
        return PlainTextResponse(e.message, status_code=status_for(e))
    return HTMLResponse(render_page(message or "", outcome.answer))


def handle_ticket_json(query: str) -> QueryResponse:
    try:
        outcome = agent_service.route_ticket(query)
    except OrchestratorError as e:
        raise HTTPException(status_code=status_for(e), detail=e.message) from e
    return QueryResponse(
        answer=outcome.answer,
        tools_used=outcome.tools_used,
        outcomes=[ToolOutcomeOut(tool_name=o.tool_name, kind=o.kind, text=o.text) for o in outcome.outcomes],
    )


def handle_summary_json(message: str) -> QueryResponse:
    try:
        outcome = agent_service.summarize(message)
    except OrchestratorError as e:
        raise HTTPException(status_code=status_for(e), detail=e.message) from e
    return QueryResponse(answer=outcome.answer, tools_used=outcome.tools_used)
