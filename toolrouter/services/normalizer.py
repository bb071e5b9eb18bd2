"""
Response normalizer: provider reply -> TicketRecord | FallbackText.

Providers answer in several shapes: {"completion": "<json text>"}, a bare JSON
object, a JSON-encoded string, or free text. Parsing is an ordered chain:
unwrap the completion envelope, decode JSON text, extract the ticket fields.
"""

import json
import logging
from typing import Any, Union

from pydantic import BaseModel

from toolrouter.core.errors import UnexpectedReplyShapeError

logger = logging.getLogger(__name__)

TICKET_NUMBER_KEY = "Ticket No."
CLASSIFICATION_KEY = "Classification"
COMPLETION_KEY = "completion"


class TicketRecord(BaseModel):
    ticket_number: str
    classification: str

    def render(self) -> str:
        return f"Ticket No.: {self.ticket_number}, Classification: {self.classification}"


class FallbackText(BaseModel):
    """Free-text provider answer, passed through verbatim."""

    text: str

    def render(self) -> str:
        return self.text


NormalizedReply = Union[TicketRecord, FallbackText]

_NOT_JSON = object()


def _unwrap_completion(raw: Any) -> Any:
    """Return the `completion` field when the reply is an envelope, else the reply itself."""
    if isinstance(raw, dict) and COMPLETION_KEY in raw:
        return raw[COMPLETION_KEY]
    return raw


def _decode_json_text(text: str) -> Any:
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return _NOT_JSON


def _extract_ticket(value: Any) -> TicketRecord:
    if isinstance(value, dict) and TICKET_NUMBER_KEY in value and CLASSIFICATION_KEY in value:
        return TicketRecord(
            ticket_number=str(value[TICKET_NUMBER_KEY]),
            classification=str(value[CLASSIFICATION_KEY]),
        )
    raise UnexpectedReplyShapeError(value)


def normalize(raw: Any) -> NormalizedReply:
    """
    Normalize one provider reply.

    - JSON text (or object) with both "Ticket No." and "Classification" -> TicketRecord
    - text that is not JSON -> FallbackText, unchanged
    - anything else (empty string, JSON without the ticket keys, lists, numbers)
      -> UnexpectedReplyShapeError
    """
    value = _unwrap_completion(raw)
    if isinstance(value, str):
        if value == "":
            raise UnexpectedReplyShapeError(raw)
        decoded = _decode_json_text(value)
        if decoded is _NOT_JSON:
            logger.info("[normalizer] reply is free text; len=%d", len(value))
            return FallbackText(text=value)
        value = decoded
    record = _extract_ticket(value)
    logger.info("[normalizer] ticket=%s classification=%s", record.ticket_number, record.classification)
    return record
