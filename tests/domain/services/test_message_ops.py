"""Tests for message selection and editing utilities."""

from inkpipe.domain.entities import Message, MessageType, Role, create_message
from inkpipe.domain.services.message_ops import (
    count_message_types,
    ensure_message_ids,
    find_message_range,
    index_of,
    replace_content,
    replace_span,
    replace_with_type,
    select_context_messages,
    select_file_messages,
    select_messages,
    strip_metadata,
    total_chars,
)


def sample_messages() -> list[Message]:
    return [
        create_message(Role.SYSTEM, "rules", MessageType.SYSTEM_PROMPT),
        create_message(Role.USER, "file", MessageType.FILE, needs_processing=True),
        create_message(Role.USER, "q1", MessageType.CONTEXT, needs_processing=True),
        create_message(Role.ASSISTANT, "a1", MessageType.CONTEXT, True),
        create_message(Role.USER, "now", MessageType.USER_INPUT),
    ]


class TestSelectMessages:
    """select_messages tests."""

    def test_by_type(self) -> None:
        messages = sample_messages()

        selected = select_messages(messages, types=[MessageType.CONTEXT])

        assert [m.content for m in selected] == ["q1", "a1"]
        assert selected[0] is messages[2]

    def test_exclude_and_roles(self) -> None:
        selected = select_messages(
            sample_messages(),
            exclude_types=[MessageType.SYSTEM_PROMPT],
            roles=[Role.USER],
        )

        assert [m.content for m in selected] == ["file", "q1", "now"]

    def test_only_unprocessed_and_limit(self) -> None:
        messages = sample_messages()
        messages[2].meta.processed = True

        selected = select_messages(messages, only_unprocessed=True, limit=1)

        assert [m.content for m in selected] == ["file"]

    def test_predicate(self) -> None:
        selected = select_messages(
            sample_messages(), predicate=lambda m: m.content.startswith("a")
        )

        assert [m.content for m in selected] == ["a1"]

    def test_shortcuts(self) -> None:
        messages = sample_messages()

        assert select_file_messages(messages) == [messages[1]]
        assert select_context_messages(messages, only_unprocessed=True) == [
            messages[2],
            messages[3],
        ]


class TestEditing:
    """In-place editing tests."""

    def test_strip_metadata(self) -> None:
        assert strip_metadata(sample_messages())[0] == {
            "role": "system",
            "content": "rules",
        }

    def test_replace_content(self) -> None:
        message = sample_messages()[2]

        replace_content(message, "changed")

        assert message.content == "changed"
        assert message.meta.processed is True

    def test_replace_with_type(self) -> None:
        message = sample_messages()[1]

        replace_with_type(message, "digest", MessageType.FILE_SUMMARY)

        assert message.type == MessageType.FILE_SUMMARY
        assert message.meta.processed is True
        assert message.is_unprocessed() is False

    def test_replace_span(self) -> None:
        messages = sample_messages()
        summary = create_message(Role.ASSISTANT, "sum", MessageType.CONTEXT_SUMMARY)

        assert replace_span(messages, 2, 2, [summary]) is True

        assert [m.type for m in messages] == [
            MessageType.SYSTEM_PROMPT,
            MessageType.FILE,
            MessageType.CONTEXT_SUMMARY,
            MessageType.USER_INPUT,
        ]

    def test_replace_span_rejects_invalid_range(self) -> None:
        messages = sample_messages()

        assert replace_span(messages, -1, 1, []) is False
        assert replace_span(messages, 5, 1, []) is False
        assert replace_span(messages, 0, 0, []) is False
        assert len(messages) == 5


class TestQueries:
    """Lookup and counting tests."""

    def test_index_of_uses_identity(self) -> None:
        messages = sample_messages()
        twin = messages[3].copy()

        assert index_of(messages, messages[3]) == 3
        assert index_of(messages, twin) == -1

    def test_find_message_range(self) -> None:
        messages = sample_messages()

        assert find_message_range(messages, MessageType.CONTEXT) == (2, 2)
        assert find_message_range(messages, MessageType.PROMPT_CARD) is None

    def test_count_and_total_chars(self) -> None:
        messages = sample_messages()

        assert count_message_types(messages) == {
            "system_prompt": 1,
            "file": 1,
            "context": 2,
            "user_input": 1,
        }
        assert total_chars(messages) == len("rulesfileq1a1now")

    def test_ensure_message_ids_keeps_existing(self) -> None:
        messages = sample_messages()[2:4]
        messages[0].meta.message_id = "caller-id"

        ids = ensure_message_ids(messages)

        assert ids[0] == "caller-id"
        assert ids[1].startswith("ctx-")
        assert ensure_message_ids(messages) == ids
