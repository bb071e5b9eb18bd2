"""
Exceptions raised by the router, each carrying a `message` fit for the end user.

Request-fatal errors (missing credential, missing query, LLM failure) are mapped
to HTTP responses by the API handlers. Errors raised while executing a single
tool are recoverable: the dispatcher turns them into a sentence for that tool
and carries on with the others.
"""


class OrchestratorError(Exception):
    """Base class. `message` is always safe to show to the end user."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class MissingCredentialError(OrchestratorError):
    """Raised when a required credential (e.g. OPENAI_API_KEY) is not configured."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"{name} is not set")


class MissingQueryError(OrchestratorError):
    """Raised when the caller did not supply the query parameter."""

    def __init__(self, parameter: str = "query") -> None:
        self.parameter = parameter
        super().__init__(f"No {parameter} provided")


class LLMCallError(OrchestratorError):
    """Raised when a classification or continuation completion fails."""

    def __init__(self, message: str = "The assistant is currently unavailable. Please try again later.") -> None:
        super().__init__(message)


class ProviderError(OrchestratorError):
    """Base for failures of a single capability provider call."""

    def __init__(self, provider_id: str, message: str) -> None:
        self.provider_id = provider_id
        super().__init__(message)


class ProviderHTTPError(ProviderError):
    """Provider answered with a non-2xx status."""

    def __init__(self, provider_id: str, status: int) -> None:
        self.status = status
        super().__init__(provider_id, f"HTTP error! status: {status}")


class ProviderTransportError(ProviderError):
    """Provider could not be reached (connect error, timeout, ...)."""

    def __init__(self, provider_id: str, detail: str) -> None:
        self.detail = detail
        super().__init__(provider_id, "the service could not be reached")


class ProviderCredentialError(ProviderError):
    """No credential configured for this one provider; other providers are unaffected."""

    def __init__(self, provider_id: str) -> None:
        super().__init__(provider_id, "the service is not configured")


class UnexpectedReplyShapeError(OrchestratorError):
    """Provider reply parsed, but carried neither a ticket record nor free text."""

    def __init__(self, reply: object) -> None:
        self.reply = reply
        super().__init__("Unexpected response format")


class InvalidToolArgumentsError(OrchestratorError):
    """Required tool arguments are missing or blank."""

    def __init__(self, tool_name: str, missing: list[str]) -> None:
        self.tool_name = tool_name
        self.missing = missing
        super().__init__(f"{tool_name} is missing required arguments: {', '.join(missing)}")


class ContentFetchError(OrchestratorError):
    """Web content could not be fetched or extracted."""

    def __init__(self, url: str, detail: str) -> None:
        self.url = url
        self.detail = detail
        super().__init__(f"Could not read content from {url}: {detail}")
