"""Tests for Message entity."""

from inkpipe.domain.entities import (
    Message,
    MessageMeta,
    MessageType,
    Role,
    create_message,
    derive_message_id,
)


class TestMessage:
    """Message entity tests."""

    def test_create_message_needing_processing(self) -> None:
        """Messages that need processing start unprocessed."""
        message = create_message(
            Role.USER, "hello", MessageType.FILE, needs_processing=True
        )

        assert message.type == MessageType.FILE
        assert message.meta.processed is False
        assert message.is_unprocessed() is True

    def test_create_message_without_processing(self) -> None:
        """Messages that need no processing start processed."""
        message = create_message(Role.SYSTEM, "rules", MessageType.SYSTEM_PROMPT)

        assert message.meta.processed is True
        assert message.is_unprocessed() is False

    def test_to_api_drops_metadata(self) -> None:
        """Only role and content are sent to the model."""
        message = Message(
            role=Role.ASSISTANT,
            content="answer",
            meta=MessageMeta(type=MessageType.CONTEXT, message_id="m1"),
        )

        assert message.to_api() == {"role": "assistant", "content": "answer"}

    def test_copy_does_not_share_meta(self) -> None:
        """A copy can be mutated without touching the original."""
        original = create_message(Role.USER, "x", MessageType.CONTEXT, True)

        copied = original.copy()
        copied.meta.processed = True
        copied.content = "y"

        assert original.meta.processed is False
        assert original.content == "x"


class TestDeriveMessageId:
    """derive_message_id tests."""

    def test_is_deterministic(self) -> None:
        """Same position and content give the same ID."""
        a = Message(role=Role.USER, content="hello world")
        b = Message(role=Role.USER, content="hello world")

        assert derive_message_id(3, a) == derive_message_id(3, b)
        assert derive_message_id(3, a).startswith("ctx-")

    def test_depends_on_position_role_and_content(self) -> None:
        """Position, role and content all change the ID."""
        base = Message(role=Role.USER, content="hello")

        ids = {
            derive_message_id(0, base),
            derive_message_id(1, base),
            derive_message_id(0, Message(role=Role.ASSISTANT, content="hello")),
            derive_message_id(0, Message(role=Role.USER, content="hello!")),
        }

        assert len(ids) == 4
