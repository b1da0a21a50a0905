from __future__ import annotations

GENERIC_FAILURE = "Failed to analyze food. Please try again."


class ServiceError(RuntimeError):
    """Base class for service-layer errors."""
    status_code = 500

class LLMError(ServiceError):
    """Errors from the LLM adapter."""

class MissingCredentialError(LLMError):
    """No upstream API key configured."""

class UpstreamTransportError(LLMError):
    """The upstream call never produced a response."""

class UpstreamStatusError(LLMError):
    """The upstream API answered with a non-2xx status."""

    def __init__(self, message: str, status_code: int = 500):
        super().__init__(message)
        self.status_code = status_code

class MalformedResponseError(LLMError):
    """The upstream body was not parseable JSON."""

class IncompleteResponseError(LLMError):
    """Parseable JSON that lacks the meal-data fields."""
