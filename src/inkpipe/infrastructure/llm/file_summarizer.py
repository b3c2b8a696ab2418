"""LLM-based file summarizer implementation."""

import asyncio
import logging
from pathlib import PurePath

from inkpipe.config.models import FileSummaryConfig
from inkpipe.domain.entities import Message, MessageType, ProcessResult
from inkpipe.domain.exceptions import EmptyResultError
from inkpipe.domain.repositories import FileSummaryCache
from inkpipe.domain.services.file_markers import parse_file_content, wrap_file_content
from inkpipe.domain.services.message_ops import replace_content, replace_with_type
from inkpipe.domain.services.protocols import TextGenerator
from inkpipe.infrastructure.llm.templates import create_jinja_env

logger = logging.getLogger(__name__)


class LLMFileSummarizer:
    """LLM-based file summarization service.

    Replaces a long attached file with a digest, keyed by its absolute path
    in the file summary cache. Short files pass through unchanged apart from
    a clean header.
    """

    def __init__(
        self,
        generator: TextGenerator,
        cache: FileSummaryCache | None,
        config: FileSummaryConfig,
    ) -> None:
        """Initialize the summarizer.

        Args:
            generator: Text generator used for digests.
            cache: File summary cache (None disables caching).
            config: File summary configuration.
        """
        self._generator = generator
        self._cache = cache
        self._config = config
        self._template = create_jinja_env().get_template("file_summary_prompt.j2")

    async def process(
        self,
        file_message: Message,
        user_input: str = "",
        abort_event: asyncio.Event | None = None,
    ) -> ProcessResult:
        """Reduce a file message to a digest, in place.

        Args:
            file_message: Message tagged ``file``.
            user_input: Raw user text, used to focus the digest.
            abort_event: Cancellation signal.

        Returns:
            Process result with the tokens spent.
        """
        parsed = parse_file_content(file_message.content)
        if file_message.meta.file_path or not parsed.is_merged:
            full_path = file_message.meta.file_path or parsed.full_path
            file_name = file_message.meta.file_name or parsed.file_name
            if not file_name and full_path:
                file_name = PurePath(full_path).name
            label = file_name or full_path or "unnamed"
        else:
            # A digest of several files is neither cached nor labelled
            # under any single one of their paths.
            full_path = None
            file_name = None
            label = f"{len(parsed.paths)} merged files"

        try:
            if len(parsed.actual_content) < self._config.min_chars:
                logger.debug(
                    "File below %d chars, passing through: %s (%d chars)",
                    self._config.min_chars,
                    label,
                    len(parsed.actual_content),
                )
                self._pass_through(file_message, file_name, parsed.actual_content)
                return ProcessResult(success=True)

            if full_path:
                cached = await self._read_cache(full_path)
                if cached is not None:
                    logger.info("Using cached file summary: %s", label)
                    self._apply_digest(file_message, file_name, cached)
                    return ProcessResult(success=True)

            result = await self._generator.generate(
                [
                    {"role": "system", "content": self._system_prompt(user_input)},
                    {"role": "user", "content": parsed.actual_content},
                ],
                temperature=self._config.temperature,
                abort_event=abort_event,
            )
            digest = result.text.strip()
            if not digest:
                raise EmptyResultError("model returned empty file summary")

            if full_path:
                await self._write_cache(full_path, digest)

            self._apply_digest(file_message, file_name, digest)
            logger.info(
                "File summarized: %s (%d -> %d chars)",
                label,
                len(parsed.actual_content),
                len(digest),
            )
            return ProcessResult(success=True, tokens_used=result.tokens_used)
        except Exception as e:
            logger.exception("File summarization failed: %s", label)
            file_message.meta.processed = True
            return ProcessResult(success=False, error=str(e))

    def _system_prompt(self, user_input: str) -> str:
        if self._config.system_prompt:
            return self._config.system_prompt
        return self._template.render(user_input=user_input.strip())

    def _pass_through(
        self, message: Message, file_name: str | None, body: str
    ) -> None:
        if file_name:
            replace_content(message, wrap_file_content(file_name, body))
        else:
            message.meta.processed = True

    def _apply_digest(
        self, message: Message, file_name: str | None, digest: str
    ) -> None:
        content = wrap_file_content(file_name, digest) if file_name else digest
        replace_with_type(message, content, MessageType.FILE_SUMMARY)

    async def _read_cache(self, full_path: str) -> str | None:
        """Read a digest; cache errors count as a miss."""
        if self._cache is None:
            return None
        try:
            cached = await self._cache.read(full_path)
        except Exception:
            logger.warning("File summary cache read failed: %s", full_path, exc_info=True)
            return None
        return cached.content if cached else None

    async def _write_cache(self, full_path: str, digest: str) -> None:
        if self._cache is None:
            return
        try:
            await self._cache.write(full_path, digest)
        except Exception:
            logger.warning("File summary cache write failed: %s", full_path, exc_info=True)
