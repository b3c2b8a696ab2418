"""Agent engine use case."""

import asyncio
import logging
from collections.abc import Callable

from inkpipe.application.services.preprocessor import Preprocessor
from inkpipe.config.models import EngineConfig
from inkpipe.domain.entities import AgentContext, EngineResult, ExecutionStage
from inkpipe.domain.exceptions import EmptyResultError
from inkpipe.domain.services.message_ops import strip_metadata
from inkpipe.domain.services.protocols import TextGenerator

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, ExecutionStage], None]


class AgentEngine:
    """Runs one agent turn.

    Drives a context through preprocessing and final generation. LLM
    failures never escape; they are reported through the returned
    EngineResult with the tokens spent so far.
    """

    def __init__(
        self,
        generator: TextGenerator,
        preprocessor: Preprocessor,
        config: EngineConfig | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """Initialize the engine.

        Args:
            generator: Text generator for the final answer.
            preprocessor: Preprocessing orchestrator.
            config: Engine configuration.
            on_progress: Called with a short message at each stage.
        """
        self._generator = generator
        self._preprocessor = preprocessor
        self._config = config or EngineConfig()
        self._on_progress = on_progress

    async def run(
        self,
        context: AgentContext,
        abort_event: asyncio.Event | None = None,
    ) -> EngineResult:
        """Execute a turn.

        Args:
            context: Freshly created agent context.
            abort_event: Cancellation signal.

        Returns:
            Engine result; ``success`` is False on any failure.
        """
        if context.meta.stage != ExecutionStage.PREPROCESSING:
            # The stage is left untouched.
            logger.error(
                "Agent turn %s cannot start from stage %s",
                context.meta.id,
                context.meta.stage.value,
            )
            return EngineResult(
                success=False,
                context=context,
                tokens_used=0,
                error=f"context already in stage {context.meta.stage.value}",
            )

        tokens_used = 0
        try:
            self._notify("Preprocessing messages", ExecutionStage.PREPROCESSING)
            preprocess_result = await self._preprocessor.preprocess(
                context, abort_event
            )
            tokens_used += preprocess_result.tokens_used
            if not preprocess_result.success:
                logger.warning(
                    "Preprocessing degraded, continuing with raw messages: %s",
                    preprocess_result.error,
                )

            context.update_stage(ExecutionStage.GENERATING)
            self._notify("Generating answer", ExecutionStage.GENERATING)
            result = await self._generator.generate(
                strip_metadata(context.messages),
                temperature=self._config.temperature,
                abort_event=abort_event,
            )
            tokens_used += result.tokens_used

            answer = result.text.strip()
            if not answer:
                raise EmptyResultError()

            context.output.final_answer = answer
            context.output.tokens_used = tokens_used
            context.update_stage(ExecutionStage.COMPLETED)
            self._notify("Completed", ExecutionStage.COMPLETED)
            logger.info(
                "Agent turn %s completed: %d tokens", context.meta.id, tokens_used
            )
            return EngineResult(
                success=True,
                context=context,
                tokens_used=tokens_used,
                final_answer=answer,
            )
        except Exception as e:
            logger.error("Agent turn %s failed: %s", context.meta.id, e)
            context.output.tokens_used = tokens_used
            context.update_stage(ExecutionStage.FAILED)
            self._notify(f"Failed: {e}", ExecutionStage.FAILED)
            return EngineResult(
                success=False,
                context=context,
                tokens_used=tokens_used,
                error=str(e),
            )

    def _notify(self, message: str, stage: ExecutionStage) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(message, stage)
        except Exception:
            logger.exception("Progress callback failed")
