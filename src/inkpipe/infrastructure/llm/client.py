"""LLM client wrapper."""

import asyncio
import logging
import time
from typing import Any

import litellm
from litellm.exceptions import (
    AuthenticationError,
    NotFoundError,
    RateLimitError,
    Timeout,
)

from inkpipe.config import LLMConfig
from inkpipe.domain.entities import GenerationResult, LLMMetrics
from inkpipe.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMCancelledError,
    LLMError,
    LLMModelNotFoundError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """LiteLLM wrapper client.

    Implements the TextGenerator protocol. Applies configuration, maps
    provider errors onto LLMError subclasses and honours an abort event.
    """

    def __init__(self, config: LLMConfig, *, debug_llm_messages: bool = False) -> None:
        """Initialize the client.

        Args:
            config: LLM configuration (model, temperature, max_tokens, etc.).
            debug_llm_messages: If True, log LLM messages at INFO level.
        """
        self._config = config
        self._debug_llm_messages = debug_llm_messages

    @property
    def model(self) -> str:
        return self._config.model

    async def generate(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
        abort_event: asyncio.Event | None = None,
    ) -> GenerationResult:
        """Execute chat completion.

        Args:
            messages: OpenAI-format message list.
                [{"role": "system", "content": "..."}, ...]
            temperature: Overrides the configured temperature.
            abort_event: When set, the in-flight request is cancelled.

        Returns:
            Generated text and metrics.

        Raises:
            LLMCancelledError: The abort event was set.
            LLMAuthenticationError: Invalid API key.
            LLMRateLimitError: Rate limit exceeded.
            LLMTimeoutError: Request timed out.
            LLMModelNotFoundError: Unknown model.
            LLMError: Other API errors.
        """
        if abort_event is not None and abort_event.is_set():
            raise LLMCancelledError()

        params: dict[str, Any] = {
            "model": self._config.model,
            "temperature": (
                temperature if temperature is not None else self._config.temperature
            ),
            "messages": messages,
        }
        if self._config.max_tokens is not None:
            params["max_tokens"] = self._config.max_tokens

        logger.debug("LLM request: model=%s", params["model"])
        if self._should_log():
            self._log_messages(messages)

        started = time.perf_counter()
        try:
            response = await self._complete(params, abort_event)
        except LLMError:
            raise
        except AuthenticationError as e:
            logger.error("LLM authentication error: %s", e)
            raise LLMAuthenticationError(str(e)) from e
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded: %s", e)
            raise LLMRateLimitError(str(e)) from e
        except Timeout as e:
            logger.warning("LLM request timed out: %s", e)
            raise LLMTimeoutError(str(e)) from e
        except NotFoundError as e:
            logger.error("LLM model not found: %s", e)
            raise LLMModelNotFoundError(str(e)) from e
        except Exception as e:
            logger.error("LLM error: %s", e)
            raise LLMError(str(e)) from e

        latency_ms = int((time.perf_counter() - started) * 1000)
        content = response.choices[0].message.content or ""
        metrics = LLMMetrics.from_usage(getattr(response, "usage", None), latency_ms)

        logger.debug(
            "LLM response received: %d tokens, %d ms",
            metrics.total_tokens,
            latency_ms,
        )
        if self._should_log():
            self._log_response(content)

        return GenerationResult(text=content, metrics=metrics)

    async def _complete(
        self, params: dict[str, Any], abort_event: asyncio.Event | None
    ) -> Any:
        """Run the completion, racing it against the abort event."""
        if abort_event is None:
            return await litellm.acompletion(**params)

        completion = asyncio.ensure_future(litellm.acompletion(**params))
        aborted = asyncio.ensure_future(abort_event.wait())
        try:
            done, _ = await asyncio.wait(
                {completion, aborted}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            aborted.cancel()
            if not completion.done():
                completion.cancel()

        if completion in done:
            return completion.result()

        logger.info("LLM request cancelled: model=%s", params["model"])
        raise LLMCancelledError()

    def _should_log(self) -> bool:
        """Check if logging should occur."""
        return self._debug_llm_messages or logger.isEnabledFor(logging.DEBUG)

    def _log_messages(self, messages: list[dict[str, str]]) -> None:
        """Log LLM request messages."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Request Messages ===")
        for i, msg in enumerate(messages):
            log_func("[%d] role=%s", i, msg.get("role", "unknown"))
            log_func("    content: %s", msg.get("content", ""))
        log_func("=== End of Messages ===")

    def _log_response(self, response: str) -> None:
        """Log LLM response."""
        log_func = logger.info if self._debug_llm_messages else logger.debug
        log_func("=== LLM Response ===")
        log_func("response: %s", response)
        log_func("=== End of Response ===")
