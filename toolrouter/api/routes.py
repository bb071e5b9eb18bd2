"""
HTTP endpoints: ticket routing and web summarization, each as an HTML page (GET)
and as JSON (POST). Every route hands its input to a function in handlers.py.
"""

import logging

from fastapi import APIRouter
from fastapi.responses import Response

from toolrouter.api.handlers import (
    handle_summary_json,
    handle_summary_page,
    handle_ticket_json,
    handle_ticket_page,
)
from toolrouter.schemas.query import QueryRequest, QueryResponse, SummarizeRequest

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Support ticket routing ---

@router.get(
    "/",
    tags=["support"],
    summary="Route a customer query to a TechBay department (HTML)",
    description="Query parameter `query` is required (400 otherwise). Returns an HTML page with the ticket or answer.",
    response_class=Response,
)
def get_ticket_page(query: str | None = None) -> Response:
    logger.info("[api:get_ticket_page] IN  query=%r", query)
    return handle_ticket_page(query)


@router.post(
    "/query",
    response_model=QueryResponse,
    tags=["support"],
    summary="Route a customer query to a TechBay department (JSON)",
    description="400 on missing query, 500 when the LLM credential is not set, 502 when the LLM call fails.",
)
def post_query(body: QueryRequest) -> QueryResponse:
    logger.info("[api:post_query] IN  query=%r", body.query)
    return handle_ticket_json(body.query)


# --- Web summarization ---

@router.get(
    "/summarize",
    tags=["summarize"],
    summary="Answer a message about a web page (HTML)",
    description="Query parameter `message` is required. The model may fetch a URL with read_content before answering.",
    response_class=Response,
)
def get_summary_page(message: str | None = None) -> Response:
    logger.info("[api:get_summary_page] IN  message=%r", message)
    return handle_summary_page(message)


@router.post(
    "/summarize",
    response_model=QueryResponse,
    tags=["summarize"],
    summary="Answer a message about a web page (JSON)",
)
def post_summarize(body: SummarizeRequest) -> QueryResponse:
    logger.info("[api:post_summarize] IN  message=%r", body.message)
    return handle_summary_json(body.message)
