"""LLM-based incremental conversation history summarizer."""

import asyncio
import logging
from datetime import datetime, timezone

from inkpipe.config.models import ContextSummaryConfig
from inkpipe.domain.entities import (
    ContextSummaryCacheEntry,
    Message,
    MessageType,
    ProcessResult,
    Role,
    create_message,
)
from inkpipe.domain.exceptions import EmptyResultError
from inkpipe.domain.repositories import ContextSummaryCache
from inkpipe.domain.services.message_ops import index_of, replace_span, total_chars
from inkpipe.domain.services.protocols import TextGenerator
from inkpipe.domain.services.summarization_policy import (
    SummarizationAction,
    SummarizationDecision,
    decide_summarization,
)
from inkpipe.infrastructure.llm.templates import create_jinja_env

logger = logging.getLogger(__name__)

SUMMARY_PREFIX = "[对话历史概括]\n\n"
PREVIOUS_SUMMARY_PREFIX = "[之前的概括]\n"


def summary_text(message: Message) -> str:
    """Return the summary body without its display prefix."""
    content = message.content
    if content.startswith(SUMMARY_PREFIX):
        return content[len(SUMMARY_PREFIX) :]
    return content


class LLMContextSummarizer:
    """LLM-based incremental context summarization service.

    Folds the older part of the conversation into a single running summary.
    Only messages added since the cached summary are sent to the model, and
    a run with nothing new reuses the cached summary without a model call.
    """

    def __init__(
        self,
        generator: TextGenerator,
        cache: ContextSummaryCache,
        config: ContextSummaryConfig,
    ) -> None:
        """Initialize the summarizer.

        Args:
            generator: Text generator used for summaries.
            cache: Context summary cache.
            config: Context summary configuration.
        """
        self._generator = generator
        self._cache = cache
        self._config = config
        self._template = create_jinja_env().get_template("context_summary_prompt.j2")

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
            all_messages: The full working sequence, edited in place.
            cache_key: Conversation key (defaults to the configured key).
            abort_event: Cancellation signal.

        Returns:
            Process result with the tokens spent.
        """
        if not context_messages:
            return ProcessResult(success=True)

        key = cache_key or self._config.cache_key
        tokens_used = 0
        try:
            cached = await self._get_cached(key)
            decision = decide_summarization(context_messages, cached, self._config)
            logger.debug(
                "Context summary decision for %s: %s (%s)",
                key,
                decision.action.value,
                decision.reason,
            )

            if decision.action == SummarizationAction.SKIP:
                _mark_processed(context_messages)
                return ProcessResult(success=True)

            start = index_of(all_messages, context_messages[0])
            if start < 0:
                raise ValueError("context messages are not part of the sequence")

            if decision.action == SummarizationAction.REUSE_CACHED:
                if decision.previous is None:
                    raise ValueError("reuse decision without a cached summary")
                replace_span(
                    all_messages,
                    start,
                    decision.new_start,
                    [decision.previous.summary_message.copy()],
                )
                _mark_processed(context_messages)
                logger.info(
                    "Reused cached context summary for %s (%d messages covered)",
                    key,
                    decision.new_start,
                )
                return ProcessResult(success=True)

            result = await self._generator.generate(
                self._build_prompt(context_messages, decision),
                abort_event=abort_event,
            )
            tokens_used = result.tokens_used
            text = result.text.strip()
            if not text:
                raise EmptyResultError("model returned empty context summary")

            summary = create_message(
                Role.ASSISTANT, SUMMARY_PREFIX + text, MessageType.CONTEXT_SUMMARY
            )
            covered = context_messages[: decision.cut_index]
            replace_span(all_messages, start, decision.cut_index, [summary])
            _mark_processed(context_messages)

            await self._save(key, summary, covered, decision.previous)
            logger.info(
                "Context summarized for %s: %d new messages, %d covered in total",
                key,
                decision.cut_index - decision.new_start,
                len(covered),
            )
            return ProcessResult(success=True, tokens_used=tokens_used)
        except Exception as e:
            logger.exception("Context summarization failed for %s", key)
            _mark_processed(context_messages)
            return ProcessResult(success=False, tokens_used=tokens_used, error=str(e))

    def _build_prompt(
        self, messages: list[Message], decision: SummarizationDecision
    ) -> list[dict[str, str]]:
        previous = decision.previous
        system_prompt = self._config.system_prompt or self._template.render(
            has_previous=previous is not None
        )
        prompt = [{"role": "system", "content": system_prompt}]
        if previous is not None:
            prompt.append(
                {
                    "role": "assistant",
                    "content": PREVIOUS_SUMMARY_PREFIX
                    + summary_text(previous.summary_message),
                }
            )
        prompt.extend(
            message.to_api()
            for message in messages[decision.new_start : decision.cut_index]
        )
        return prompt

    async def _get_cached(self, key: str) -> ContextSummaryCacheEntry | None:
        """Read the cached summary; cache errors count as a miss."""
        try:
            return await self._cache.get(key)
        except Exception:
            logger.warning("Context summary cache read failed: %s", key, exc_info=True)
            return None

    async def _save(
        self,
        key: str,
        summary: Message,
        covered: list[Message],
        previous: ContextSummaryCacheEntry | None,
    ) -> None:
        now = datetime.now(timezone.utc)
        entry = ContextSummaryCacheEntry(
            summary_message=summary,
            summarized_message_ids=tuple(
                message.meta.message_id or "" for message in covered
            ),
            total_chars=total_chars(covered),
            created_at=previous.created_at if previous else now,
            updated_at=now,
        )
        try:
            await self._cache.save(key, entry)
        except Exception:
            logger.warning("Context summary cache write failed: %s", key, exc_info=True)


def _mark_processed(messages: list[Message]) -> None:
    for message in messages:
        message.meta.processed = True
