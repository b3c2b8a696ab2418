"""AgentContext construction and debug formatting."""

import copy
from collections.abc import Sequence

from inkpipe.config.models import BuilderConfig
from inkpipe.domain.entities.agent_context import (
    AgentContext,
    AgentInput,
    ProcessingState,
)
from inkpipe.domain.entities.inputs import AttachedFile, HistoryEntry, PromptCard
from inkpipe.domain.services.message_builder import MessageBuilder
from inkpipe.domain.services.message_ops import count_message_types


def create_context(
    user_input: str,
    conversation_history: Sequence[HistoryEntry] = (),
    attached_contents: Sequence[str | AttachedFile] = (),
    prompt_cards: Sequence[PromptCard] = (),
    builder_config: BuilderConfig | None = None,
) -> AgentContext:
    """Create the context for one user request.

    The caller's data is deep-copied into the read-only input zone, then
    the message builder produces the initial processing sequence.

    Args:
        user_input: Raw user text.
        conversation_history: Past turns, oldest first.
        attached_contents: File contents (marker text or AttachedFile).
        prompt_cards: Prompt cards to place.
        builder_config: Message builder settings.

    Returns:
        A fresh AgentContext in the preprocessing stage.
    """
    agent_input = AgentInput(
        user_input=user_input,
        attached_contents=tuple(copy.deepcopy(list(attached_contents))),
        conversation_history=tuple(copy.deepcopy(list(conversation_history))),
        prompt_cards=tuple(copy.deepcopy(list(prompt_cards))),
        builder_config=copy.deepcopy(builder_config or BuilderConfig()),
    )

    result = MessageBuilder(agent_input.builder_config).build(
        user_input=agent_input.user_input,
        conversation_history=agent_input.conversation_history,
        attached_contents=agent_input.attached_contents,
        prompt_cards=agent_input.prompt_cards,
    )

    return AgentContext(
        input=agent_input,
        processing=ProcessingState(messages=result.messages),
    )


def _preview(text: str, limit: int = 100) -> str:
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def format_context_for_debug(context: AgentContext) -> str:
    """Format a context as a multi-line debug dump."""
    lines = [
        "=== Agent Context ===",
        f"ID: {context.meta.id}",
        f"Stage: {context.meta.stage.value}",
        "",
        "--- Input ---",
        f"User Input: {_preview(context.input.user_input)}",
        f"Attached Contents: {len(context.input.attached_contents)} files",
        f"Conversation History: {len(context.input.conversation_history)} messages",
        f"Prompt Cards: {len(context.input.prompt_cards)}",
        "",
        "--- Processing ---",
        f"Messages: {len(context.messages)}",
        f"Preprocessed: {context.processing.preprocessed}",
        "Message Types:",
    ]
    for message_type, count in count_message_types(context.messages).items():
        lines.append(f"  - {message_type}: {count}")

    answer = context.output.final_answer
    lines.extend(
        [
            "",
            "--- Output ---",
            f"Final Answer: {'Yes' if answer else 'No'}",
        ]
    )
    if answer:
        lines.append(f"Answer Length: {len(answer)} chars")
    lines.append(f"Tokens Used: {context.output.tokens_used}")
    return "\n".join(lines)
