"""Preprocessing orchestrator."""

import asyncio
import logging
import time

from inkpipe.config.models import PreprocessorConfig
from inkpipe.domain.entities import (
    AgentContext,
    Message,
    MessageType,
    PreprocessResult,
)
from inkpipe.domain.services.message_ops import (
    count_message_types,
    find_message_range,
    select_context_messages,
    select_file_messages,
)
from inkpipe.domain.services.protocols import ContextSummarizer, FileSummarizer

logger = logging.getLogger(__name__)


class Preprocessor:
    """Preprocessing orchestrator.

    Runs file summarization over every unprocessed ``file`` message, then
    hands the unprocessed ``context`` messages to the context summarizer.
    Sub-task failures never abort the phase; they only show up in the
    counters of the result.
    """

    def __init__(
        self,
        file_summarizer: FileSummarizer,
        context_summarizer: ContextSummarizer,
        config: PreprocessorConfig,
    ) -> None:
        """Initialize the preprocessor.

        Args:
            file_summarizer: File summarization service.
            context_summarizer: Context summarization service.
            config: Preprocessor configuration.
        """
        self._file_summarizer = file_summarizer
        self._context_summarizer = context_summarizer
        self._config = config

    async def preprocess(
        self,
        context: AgentContext,
        abort_event: asyncio.Event | None = None,
    ) -> PreprocessResult:
        """Preprocess the messages of a context, in place.

        Args:
            context: Agent context whose messages are rewritten.
            abort_event: Cancellation signal forwarded to every model call.

        Returns:
            Aggregated result. ``context.processing.preprocessed`` is True
            afterwards regardless of the outcome.
        """
        started = time.perf_counter()

        if self._config.skip:
            logger.info("Preprocessing skipped by configuration")
            context.processing.preprocessed = True
            context.output.metadata["preprocess"] = {"skipped": True}
            return PreprocessResult(success=True)

        tokens_used = 0
        files_processed = 0
        files_failed = 0
        context_summarized = False
        try:
            messages = context.messages
            user_input = context.input.user_input

            file_messages = select_file_messages(messages, only_unprocessed=True)
            files_started = time.perf_counter()
            for ok, tokens in await self._process_files(
                file_messages, user_input, abort_event
            ):
                files_processed += 1
                tokens_used += tokens
                if not ok:
                    files_failed += 1
            files_ms = int((time.perf_counter() - files_started) * 1000)

            context_messages = select_context_messages(messages, only_unprocessed=True)
            context_started = time.perf_counter()
            if len(context_messages) > 1:
                result = await self._context_summarizer.process(
                    context_messages, messages, abort_event=abort_event
                )
                tokens_used += result.tokens_used
                # Skipped history succeeds without producing a summary.
                context_summarized = (
                    result.success
                    and find_message_range(messages, MessageType.CONTEXT_SUMMARY)
                    is not None
                )
            context_ms = int((time.perf_counter() - context_started) * 1000)

            context.output.metadata["preprocess"] = {
                "duration_ms": int((time.perf_counter() - started) * 1000),
                "file_duration_ms": files_ms,
                "context_duration_ms": context_ms,
                "files_processed": files_processed,
                "files_failed": files_failed,
                "context_messages": len(context_messages),
                "context_summarized": context_summarized,
                "tokens_used": tokens_used,
                "message_types": count_message_types(messages),
            }
            logger.info(
                "Preprocessing completed: %d files (%d failed), context=%s, "
                "%d tokens",
                files_processed,
                files_failed,
                context_summarized,
                tokens_used,
            )
            return PreprocessResult(
                success=True,
                tokens_used=tokens_used,
                files_processed=files_processed,
                files_failed=files_failed,
                context_summarized=context_summarized,
            )
        except Exception as e:
            logger.exception("Preprocessing failed")
            return PreprocessResult(
                success=False,
                tokens_used=tokens_used,
                files_processed=files_processed,
                files_failed=files_failed,
                context_summarized=context_summarized,
                error=str(e),
            )
        finally:
            context.processing.preprocessed = True

    async def _process_files(
        self,
        file_messages: list[Message],
        user_input: str,
        abort_event: asyncio.Event | None,
    ) -> list[tuple[bool, int]]:
        """Summarize file messages.

        Returns:
            (success, tokens) per file message, in order.
        """
        if not file_messages:
            return []

        outcomes: list[tuple[bool, int]] = []
        if not self._config.parallel_files or len(file_messages) == 1:
            for message in file_messages:
                result = await self._file_summarizer.process(
                    message, user_input, abort_event
                )
                outcomes.append((result.success, result.tokens_used))
            return outcomes

        batch_size = max(1, self._config.max_concurrency)
        for offset in range(0, len(file_messages), batch_size):
            batch = file_messages[offset : offset + batch_size]
            logger.debug(
                "Processing file batch %d (%d files)",
                offset // batch_size + 1,
                len(batch),
            )
            results = await asyncio.gather(
                *(
                    self._file_summarizer.process(message, user_input, abort_event)
                    for message in batch
                ),
                return_exceptions=True,
            )
            for message, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.error("File summarizer raised: %s", result)
                    message.meta.processed = True
                    outcomes.append((False, 0))
                else:
                    outcomes.append((result.success, result.tokens_used))
        return outcomes
