"""Pipeline result entities."""

from dataclasses import dataclass

from inkpipe.domain.entities.agent_context import AgentContext


@dataclass(frozen=True)
class ProcessResult:
    """Result of a single summarization step.

    Attributes:
        success: False when the step degraded to keeping the original content.
        tokens_used: Tokens consumed by the step.
        error: Error message on failure.
    """

    success: bool
    tokens_used: int = 0
    error: str | None = None


@dataclass(frozen=True)
class PreprocessResult:
    """Result of the preprocessing phase.

    Attributes:
        success: False only if the phase itself broke; sub-task failures
            are reported through the counters.
        tokens_used: Tokens summed across file and context summarization.
        files_processed: File messages handled.
        files_failed: File messages that kept their original content.
        context_summarized: Whether history was replaced by a summary message.
        error: Error message on failure.
    """

    success: bool
    tokens_used: int = 0
    files_processed: int = 0
    files_failed: int = 0
    context_summarized: bool = False
    error: str | None = None


@dataclass(frozen=True)
class EngineResult:
    """Result of one agent turn.

    Attributes:
        success: Whether a final answer was produced.
        context: Final state of the agent context.
        tokens_used: Tokens consumed, preserved on failure.
        final_answer: Model answer on success.
        error: Human-readable error on failure.
    """

    success: bool
    context: AgentContext
    tokens_used: int = 0
    final_answer: str | None = None
    error: str | None = None
