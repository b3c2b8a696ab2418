"""Shared test fixtures."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timezone

import pytest

from inkpipe.domain.entities import (
    ContextSummaryCacheEntry,
    GenerationResult,
    LLMMetrics,
    Message,
    MessageType,
    Role,
    create_message,
)


class FakeGenerator:
    """TextGenerator double.

    Returns canned replies in order (the last one repeats), records every
    call and tracks the highest number of calls in flight at once.
    """

    def __init__(
        self,
        replies: list[str] | None = None,
        *,
        tokens: int = 10,
        delay: float = 0.0,
        error: Exception | None = None,
    ) -> None:
        self.replies = replies or ["generated text"]
        self.tokens = tokens
        self.delay = delay
        self.error = error
        self.calls: list[dict] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        abort_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        self.calls.append(
            {
                "messages": messages,
                "temperature": temperature,
                "abort_event": abort_event,
            }
        )
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            index = min(len(self.calls) - 1, len(self.replies) - 1)
            return GenerationResult(
                text=self.replies[index],
                metrics=LLMMetrics(total_tokens=self.tokens),
            )
        finally:
            self.in_flight -= 1


@pytest.fixture
def fake_generator() -> FakeGenerator:
    """Create a fake generator with a single canned reply."""
    return FakeGenerator()


def build_history(count: int, chars: int = 500) -> list[Message]:
    """Create alternating user/assistant context messages of a fixed size."""
    messages = []
    for index in range(count):
        role = Role.USER if index % 2 == 0 else Role.ASSISTANT
        body = f"turn {index}: "
        messages.append(
            create_message(
                role,
                body + "x" * max(0, chars - len(body)),
                MessageType.CONTEXT,
                needs_processing=True,
            )
        )
    return messages


def build_summary_entry(
    ids: list[str], text: str = "earlier summary", total: int = 0
) -> ContextSummaryCacheEntry:
    """Create a cached context summary covering the given IDs."""
    created = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)
    return ContextSummaryCacheEntry(
        summary_message=create_message(
            Role.ASSISTANT, "[对话历史概括]\n\n" + text, MessageType.CONTEXT_SUMMARY
        ),
        summarized_message_ids=tuple(ids),
        total_chars=total,
        created_at=created,
        updated_at=created,
    )


@pytest.fixture
def make_history() -> Callable[..., list[Message]]:
    """Factory for context message lists."""
    return build_history


@pytest.fixture
def make_summary_entry() -> Callable[..., ContextSummaryCacheEntry]:
    """Factory for cached context summaries."""
    return build_summary_entry


@pytest.fixture
def make_generator() -> type[FakeGenerator]:
    """Factory for configured fake generators."""
    return FakeGenerator
