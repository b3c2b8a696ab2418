"""LLM integration."""

from inkpipe.infrastructure.llm.client import LLMClient
from inkpipe.infrastructure.llm.context_summarizer import LLMContextSummarizer
from inkpipe.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMCancelledError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from inkpipe.infrastructure.llm.file_summarizer import LLMFileSummarizer

__all__ = [
    "LLMAuthenticationError",
    "LLMCancelledError",
    "LLMClient",
    "LLMContextSummarizer",
    "LLMError",
    "LLMFileSummarizer",
    "LLMModelNotFoundError",
    "LLMRateLimitError",
    "LLMTimeoutError",
]
