"""
Provider client: one HTTP call to a capability provider (Langbase department pipe).

Responsibility: POST the customer query to the provider's generate endpoint with
that provider's own bearer token and return the raw reply. No parsing beyond
JSON decoding; shape handling lives in the normalizer.
"""

import logging
import time
from typing import Any, Mapping

import httpx

from toolrouter.core.config import PROVIDER_HTTP_TIMEOUT, ProviderConfig
from toolrouter.core.errors import (
    ProviderCredentialError,
    ProviderHTTPError,
    ProviderTransportError,
)
from toolrouter.core.events import ProviderCallEvent, emit

logger = logging.getLogger(__name__)


class ProviderClient:
    """
    Executes provider calls. Each provider is authorized with its own credential,
    so a missing or rejected key only disables that one capability.
    """

    def __init__(
        self,
        providers: Mapping[str, ProviderConfig],
        timeout: float = PROVIDER_HTTP_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._providers = dict(providers)
        self._timeout = timeout
        self._transport = transport

    def invoke(self, provider_id: str, payload: str) -> Any:
        """
        POST {"messages": [{"role": "user", "content": payload}]} to the provider.
        Returns the decoded JSON body, or the raw text when the body is not JSON.
        Raises ProviderCredentialError, ProviderHTTPError or ProviderTransportError.
        """
        logger.info("[provider:invoke] IN  provider=%s payload_len=%d", provider_id, len(payload or ""))
        config = self._providers.get(provider_id)
        if config is None or not config.api_key:
            emit(ProviderCallEvent(provider_id=provider_id, latency_ms=0.0, outcome="credential_error"))
            raise ProviderCredentialError(provider_id)

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {config.api_key}",
        }
        body = {"messages": [{"role": "user", "content": payload}]}
        started = time.perf_counter()
        try:
            with httpx.Client(timeout=self._timeout, transport=self._transport) as client:
                response = client.post(config.url, json=body, headers=headers)
        except httpx.HTTPError as e:
            latency_ms = (time.perf_counter() - started) * 1000
            emit(ProviderCallEvent(provider_id=provider_id, latency_ms=latency_ms, outcome="transport_error"))
            logger.warning("[provider:invoke] provider=%s request failed: %s", provider_id, e)
            raise ProviderTransportError(provider_id, str(e)) from e
        latency_ms = (time.perf_counter() - started) * 1000

        if not response.is_success:
            emit(ProviderCallEvent(
                provider_id=provider_id,
                status=response.status_code,
                latency_ms=latency_ms,
                outcome="http_error",
            ))
            logger.warning(
                "[provider:invoke] provider=%s error %s: %s",
                provider_id, response.status_code, response.text[:200],
            )
            raise ProviderHTTPError(provider_id, response.status_code)

        emit(ProviderCallEvent(
            provider_id=provider_id,
            status=response.status_code,
            latency_ms=latency_ms,
            outcome="ok",
        ))
        try:
            data = response.json()
        except ValueError:
            logger.info("[provider:invoke] provider=%s body is not JSON; returning text", provider_id)
            return response.text
        logger.debug("[provider:invoke] OUT provider=%s reply=%r", provider_id, data)
        return data
