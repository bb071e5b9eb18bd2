"""
Web content fetcher: URL -> readable paragraph text for the summarization flow.
"""

import logging
import re
import time
from urllib.parse import urlparse

import httpx
from bs4 import BeautifulSoup

from toolrouter.core.config import FETCH_HTTP_TIMEOUT, FETCH_MAX_CHARS, FETCH_USER_AGENT
from toolrouter.core.errors import ContentFetchError, InvalidToolArgumentsError
from toolrouter.core.events import ProviderCallEvent, emit

logger = logging.getLogger(__name__)

PROVIDER_ID = "web_content"

_WHITESPACE = re.compile(r"\s+")


def extract_text(html: str, max_chars: int = FETCH_MAX_CHARS) -> str:
    """Return paragraph text (or body text when the page has no <p>), whitespace-collapsed."""
    soup = BeautifulSoup(html, "html.parser")
    for irrelevant in soup(["script", "style", "noscript", "img", "input"]):
        irrelevant.decompose()
    paragraphs = [_WHITESPACE.sub(" ", p.get_text(" ", strip=True)) for p in soup.find_all("p")]
    paragraphs = [p for p in paragraphs if p]
    if paragraphs:
        text = "\n\n".join(paragraphs)
    else:
        root = soup.body or soup
        text = _WHITESPACE.sub(" ", root.get_text(" ", strip=True))
    if len(text) > max_chars:
        text = text[:max_chars].rstrip()
    return text


def read_content(url: str, transport: httpx.BaseTransport | None = None) -> str:
    """
    Fetch an http(s) URL and return its extracted text.
    Raises InvalidToolArgumentsError for a non-http(s) URL, ContentFetchError otherwise.
    """
    url = (url or "").strip()
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidToolArgumentsError("read_content", ["url"])
    logger.info("[web_content:read_content] IN  url=%s", url)
    started = time.perf_counter()
    try:
        with httpx.Client(
            timeout=FETCH_HTTP_TIMEOUT,
            follow_redirects=True,
            headers={"User-Agent": FETCH_USER_AGENT},
            transport=transport,
        ) as client:
            response = client.get(url)
    except httpx.HTTPError as e:
        latency_ms = (time.perf_counter() - started) * 1000
        emit(ProviderCallEvent(provider_id=PROVIDER_ID, latency_ms=latency_ms, outcome="transport_error"))
        raise ContentFetchError(url, "the page could not be reached") from e
    latency_ms = (time.perf_counter() - started) * 1000

    if not response.is_success:
        emit(ProviderCallEvent(
            provider_id=PROVIDER_ID,
            status=response.status_code,
            latency_ms=latency_ms,
            outcome="http_error",
        ))
        raise ContentFetchError(url, f"the page returned status {response.status_code}")
    emit(ProviderCallEvent(
        provider_id=PROVIDER_ID,
        status=response.status_code,
        latency_ms=latency_ms,
        outcome="ok",
    ))

    text = extract_text(response.text)
    if not text:
        raise ContentFetchError(url, "the page has no readable text")
    logger.info("[web_content:read_content] OUT url=%s text_len=%d", url, len(text))
    return text
