"""Domain services."""

from inkpipe.domain.services.context_factory import (
    create_context,
    format_context_for_debug,
)
from inkpipe.domain.services.message_builder import BuildResult, MessageBuilder
from inkpipe.domain.services.protocols import (
    ContextSummarizer,
    FileSummarizer,
    TextGenerator,
)
from inkpipe.domain.services.summarization_policy import (
    SummarizationAction,
    SummarizationDecision,
    decide_summarization,
)

__all__ = [
    "BuildResult",
    "ContextSummarizer",
    "FileSummarizer",
    "MessageBuilder",
    "SummarizationAction",
    "SummarizationDecision",
    "TextGenerator",
    "create_context",
    "decide_summarization",
    "format_context_for_debug",
]
