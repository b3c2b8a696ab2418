"""Tests for context creation."""

from inkpipe.config import BuilderConfig, FileContentPlacement
from inkpipe.domain.entities import (
    AttachedFile,
    ExecutionStage,
    HistoryEntry,
    MessageType,
    Role,
)
from inkpipe.domain.services import create_context, format_context_for_debug


class TestCreateContext:
    """create_context tests."""

    def test_builds_initial_sequence(self) -> None:
        context = create_context(
            "Summarize the attached report",
            attached_contents=[AttachedFile(content="x" * 10, path="/r.md")],
            builder_config=BuilderConfig(
                system_prompt="sys",
                file_content_placement=FileContentPlacement.AFTER_SYSTEM,
            ),
        )

        assert [m.type for m in context.messages] == [
            MessageType.SYSTEM_PROMPT,
            MessageType.FILE,
            MessageType.USER_INPUT,
        ]
        assert context.meta.stage == ExecutionStage.PREPROCESSING
        assert context.processing.preprocessed is False

    def test_input_is_isolated_from_caller(self) -> None:
        """Mutating the caller's list afterwards does not leak in."""
        history = [HistoryEntry(role=Role.USER, content="q1")]

        context = create_context("q2", conversation_history=history)
        history.append(HistoryEntry(role=Role.USER, content="late"))

        assert len(context.input.conversation_history) == 1

    def test_debug_format(self) -> None:
        context = create_context(
            "q", conversation_history=[HistoryEntry(role=Role.USER, content="q1")]
        )

        dump = format_context_for_debug(context)

        assert context.meta.id in dump
        assert "Stage: preprocessing" in dump
        assert "  - context: 1" in dump
        assert "Final Answer: No" in dump
