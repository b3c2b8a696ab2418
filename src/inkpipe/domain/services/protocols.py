"""Domain service protocols."""

import asyncio
from typing import Protocol

from inkpipe.domain.entities import GenerationResult, Message, ProcessResult


class TextGenerator(Protocol):
    """Text generation abstraction.

    The single access point to a language model. Provider-specific
    adapters live behind this protocol.
    """

    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        abort_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        """Generate text from OpenAI-format messages.

        Args:
            messages: [{"role": "system", "content": "..."}, ...]
            temperature: Sampling temperature override.
            abort_event: Cancellation signal; when set the call is aborted.

        Returns:
            Generated text and metrics.

        Raises:
            LLMError: If generation fails or is cancelled.
        """
        ...


class FileSummarizer(Protocol):
    """File message summarization service."""

    async def process(
        self,
        file_message: Message,
        user_input: str = "",
        abort_event: asyncio.Event | None = None,
    ) -> ProcessResult:
        """Reduce a file message to a digest, in place.

        Args:
            file_message: Message tagged ``file``; mutated in place.
            user_input: Raw user text, used to focus the digest.
            abort_event: Cancellation signal.

        Returns:
            Process result. On failure the original content is kept and
            the message is marked processed.
        """
        ...


class ContextSummarizer(Protocol):
    """Incremental conversation history summarization service."""

    async def process(
        self,
        context_messages: list[Message],
        all_messages: list[Message],
        cache_key: str | None = None,
        abort_event: asyncio.Event | None = None,
    ) -> ProcessResult:
        """Compress conversation history into a running summary.

        Args:
            context_messages: Contiguous ``context`` messages, oldest first.
            all_messages: The full working sequence; the summarized span is
                replaced in place.
            cache_key: Conversation key (defaults to the configured key).
            abort_event: Cancellation signal.

        Returns:
            Process result. On failure every context message is marked
            processed and left unchanged.
        """
        ...
