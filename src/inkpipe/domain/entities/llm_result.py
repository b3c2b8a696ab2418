"""LLM result entities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LLMMetrics:
    """LLM invocation metrics.

    Attributes:
        input_tokens: Number of input tokens.
        output_tokens: Number of output tokens.
        total_tokens: Total number of tokens.
        latency_ms: Latency in milliseconds (optional).
    """

    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    latency_ms: int | None = None

    @classmethod
    def from_usage(cls, usage: Any, latency_ms: int | None = None) -> "LLMMetrics":
        """Create LLMMetrics from an OpenAI-style usage block.

        Args:
            usage: ``response.usage`` object or dict (may be None).
            latency_ms: Measured latency.

        Returns:
            LLMMetrics instance (zeros when usage is unavailable).
        """
        if usage is None:
            return cls(latency_ms=latency_ms)

        def _get(name: str) -> int:
            if isinstance(usage, dict):
                value = usage.get(name)
            else:
                value = getattr(usage, name, None)
            return value if isinstance(value, int) else 0

        input_tokens = _get("prompt_tokens")
        output_tokens = _get("completion_tokens")
        total_tokens = _get("total_tokens") or input_tokens + output_tokens
        return cls(
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
            latency_ms=latency_ms,
        )


@dataclass(frozen=True)
class GenerationResult:
    """Text generation result.

    Attributes:
        text: The generated text.
        metrics: LLM invocation metrics (optional).
    """

    text: str
    metrics: LLMMetrics | None = None

    @property
    def tokens_used(self) -> int:
        return self.metrics.total_tokens if self.metrics else 0
