"""
Settings for the support router, read once from the environment (and .env).

Holds the OpenAI key and model, one Langbase pipe key per department, HTTP
timeouts and fetch limits. Department keys are bundled into ProviderConfig
objects that ProviderClient receives when it is built.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"

# OpenAI (classification + continuation LLM)
OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "").strip()
OPENAI_LLM_MODEL: str = (
    os.getenv("OPENAI_LLM_MODEL", "gpt-3.5-turbo").strip() or "gpt-3.5-turbo"
)

# Classification is idempotent: one immediate retry. Continuation calls never retry.
CLASSIFY_MAX_RETRIES: int = 1

# Langbase department pipes (one credential per capability)
PROVIDER_API_URL: str = (
    os.getenv("PROVIDER_API_URL", "https://api.langbase.com/beta/generate").strip()
    or "https://api.langbase.com/beta/generate"
)
LANGBASE_SPORTS_PIPE_API_KEY: str = os.getenv("LANGBASE_SPORTS_PIPE_API_KEY", "").strip()
LANGBASE_ELECTRONICS_PIPE_API_KEY: str = os.getenv("LANGBASE_ELECTRONICS_PIPE_API_KEY", "").strip()
LANGBASE_TRAVEL_PIPE_API_KEY: str = os.getenv("LANGBASE_TRAVEL_PIPE_API_KEY", "").strip()

# API timeouts (seconds)
LLM_API_TIMEOUT: float = 60.0
PROVIDER_HTTP_TIMEOUT: float = 30.0
FETCH_HTTP_TIMEOUT: float = 15.0

# Web content extraction
FETCH_MAX_CHARS: int = 8000
FETCH_USER_AGENT: str = "Mozilla/5.0 (compatible; TechBaySupportBot/1.0)"

# Parallel tool invocations within one classification response
MAX_TOOL_WORKERS: int = 4


class ProviderConfig(BaseModel):
    """Endpoint and bearer credential for one capability provider."""

    url: str
    api_key: str = ""


def provider_configs() -> dict[str, ProviderConfig]:
    """Build the provider_id -> ProviderConfig mapping injected into ProviderClient."""
    return {
        "sports": ProviderConfig(url=PROVIDER_API_URL, api_key=LANGBASE_SPORTS_PIPE_API_KEY),
        "electronics": ProviderConfig(url=PROVIDER_API_URL, api_key=LANGBASE_ELECTRONICS_PIPE_API_KEY),
        "travel": ProviderConfig(url=PROVIDER_API_URL, api_key=LANGBASE_TRAVEL_PIPE_API_KEY),
    }
