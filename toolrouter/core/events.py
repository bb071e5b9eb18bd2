"""
Structured events for outbound provider calls.

One ProviderCallEvent is emitted per call (department pipe or web fetch). Events
are logged on the "toolrouter.events" logger with the event fields in `extra`,
and fanned out to in-process subscribers (tests, failure-rate counters).
"""

import logging
import threading
from typing import Callable, Literal

from pydantic import BaseModel

logger = logging.getLogger("toolrouter.events")

OutcomeKind = Literal["ok", "http_error", "transport_error", "credential_error"]


class ProviderCallEvent(BaseModel):
    provider_id: str
    status: int | None = None
    latency_ms: float
    outcome: OutcomeKind


Subscriber = Callable[[ProviderCallEvent], None]

_subscribers: list[Subscriber] = []
_lock = threading.Lock()


def subscribe(callback: Subscriber) -> None:
    """Register a callback invoked with every emitted event."""
    with _lock:
        _subscribers.append(callback)


def unsubscribe(callback: Subscriber) -> None:
    with _lock:
        if callback in _subscribers:
            _subscribers.remove(callback)


def emit(event: ProviderCallEvent) -> None:
    """Log the event and deliver it to every subscriber."""
    level = logging.INFO if event.outcome == "ok" else logging.WARNING
    logger.log(
        level,
        "[events:provider_call] provider=%s status=%s latency_ms=%.1f outcome=%s",
        event.provider_id,
        event.status,
        event.latency_ms,
        event.outcome,
        extra={"provider_call": event.model_dump()},
    )
    with _lock:
        callbacks = list(_subscribers)
    for callback in callbacks:
        try:
            callback(event)
        except Exception:
            logger.exception("[events:emit] subscriber %r failed", callback)
