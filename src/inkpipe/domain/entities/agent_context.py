"""AgentContext entity."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from inkpipe.config.models import BuilderConfig
from inkpipe.domain.entities.inputs import AttachedFile, HistoryEntry, PromptCard
from inkpipe.domain.entities.message import Message
from inkpipe.domain.exceptions import InvalidStageTransitionError


class ExecutionStage(str, Enum):
    """Stage of a single agent turn."""

    PREPROCESSING = "preprocessing"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


_ALLOWED_TRANSITIONS: dict[ExecutionStage, frozenset[ExecutionStage]] = {
    ExecutionStage.PREPROCESSING: frozenset(
        {ExecutionStage.GENERATING, ExecutionStage.FAILED}
    ),
    ExecutionStage.GENERATING: frozenset(
        {ExecutionStage.COMPLETED, ExecutionStage.FAILED}
    ),
    ExecutionStage.COMPLETED: frozenset(),
    ExecutionStage.FAILED: frozenset(),
}


@dataclass(frozen=True)
class AgentInput:
    """Write-once copy of the caller's data.

    Attributes:
        user_input: Raw user text.
        attached_contents: Attached file contents.
        conversation_history: Past turns in chronological order.
        prompt_cards: Prompt cards selected by the user.
        builder_config: Configuration used to build the messages.
    """

    user_input: str
    attached_contents: tuple[str | AttachedFile, ...] = ()
    conversation_history: tuple[HistoryEntry, ...] = ()
    prompt_cards: tuple[PromptCard, ...] = ()
    builder_config: BuilderConfig = field(default_factory=BuilderConfig)


@dataclass
class ProcessingState:
    """Live message sequence, mutated only by preprocessing."""

    messages: list[Message] = field(default_factory=list)
    preprocessed: bool = False


@dataclass
class AgentOutput:
    """Result zone, mutated only by the generation phase."""

    final_answer: str | None = None
    tokens_used: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class AgentMeta:
    """Identity and stage of the turn."""

    id: str = field(default_factory=lambda: f"ws_{uuid4().hex}")
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    stage: ExecutionStage = ExecutionStage.PREPROCESSING


@dataclass
class AgentContext:
    """Per-request context threaded through the engine.

    One context is created per user request and discarded once the answer
    has been returned.
    """

    input: AgentInput
    processing: ProcessingState
    output: AgentOutput = field(default_factory=AgentOutput)
    meta: AgentMeta = field(default_factory=AgentMeta)

    @property
    def messages(self) -> list[Message]:
        return self.processing.messages

    def update_stage(self, stage: ExecutionStage) -> None:
        """Move to the next stage.

        Args:
            stage: Target stage.

        Raises:
            InvalidStageTransitionError: If the transition is not linear.
        """
        current = self.meta.stage
        if stage not in _ALLOWED_TRANSITIONS[current]:
            raise InvalidStageTransitionError(current.value, stage.value)
        self.meta.stage = stage
