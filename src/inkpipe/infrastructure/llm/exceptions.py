"""LLM-related exceptions."""


class LLMError(Exception):
    """Base exception for LLM-related errors."""


class LLMRateLimitError(LLMError):
    """Rate limit exceeded error."""


class LLMAuthenticationError(LLMError):
    """Authentication error (invalid API key, etc.)."""


class LLMTimeoutError(LLMError):
    """Request timed out."""


class LLMModelNotFoundError(LLMError):
    """Configured model does not exist at the provider."""


class LLMCancelledError(LLMError):
    """The request was aborted through its abort event."""

    def __init__(self, message: str = "request cancelled") -> None:
        super().__init__(message)
