"""Domain entities."""

from inkpipe.domain.entities.agent_context import (
    AgentContext,
    AgentInput,
    AgentMeta,
    AgentOutput,
    ExecutionStage,
    ProcessingState,
)
from inkpipe.domain.entities.cache_entry import (
    ContextSummaryCacheEntry,
    SummaryCacheResult,
)
from inkpipe.domain.entities.inputs import (
    AttachedFile,
    CardPlacement,
    HistoryEntry,
    PromptCard,
)
from inkpipe.domain.entities.llm_result import GenerationResult, LLMMetrics
from inkpipe.domain.entities.message import (
    Message,
    MessageMeta,
    MessageType,
    Role,
    create_message,
    derive_message_id,
)
from inkpipe.domain.entities.process_result import (
    EngineResult,
    PreprocessResult,
    ProcessResult,
)

__all__ = [
    "AgentContext",
    "AgentInput",
    "AgentMeta",
    "AgentOutput",
    "AttachedFile",
    "CardPlacement",
    "ContextSummaryCacheEntry",
    "EngineResult",
    "ExecutionStage",
    "GenerationResult",
    "HistoryEntry",
    "LLMMetrics",
    "Message",
    "MessageMeta",
    "MessageType",
    "PreprocessResult",
    "ProcessResult",
    "ProcessingState",
    "PromptCard",
    "Role",
    "SummaryCacheResult",
    "create_message",
    "derive_message_id",
]
