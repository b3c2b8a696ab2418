"""Message selection and in-place editing utilities."""

from collections.abc import Callable, Iterable

from inkpipe.domain.entities.message import (
    Message,
    MessageType,
    Role,
    derive_message_id,
)


def select_messages(
    messages: list[Message],
    *,
    types: Iterable[MessageType] | None = None,
    exclude_types: Iterable[MessageType] | None = None,
    roles: Iterable[Role] | None = None,
    only_unprocessed: bool = False,
    predicate: Callable[[Message], bool] | None = None,
    limit: int | None = None,
) -> list[Message]:
    """Select messages matching all given criteria.

    Args:
        messages: Message sequence.
        types: Keep only these types.
        exclude_types: Drop these types.
        roles: Keep only these roles.
        only_unprocessed: Keep only messages waiting for preprocessing.
        predicate: Custom filter.
        limit: Maximum number of messages (None or <= 0 for all).

    Returns:
        Selected messages, in their original order (same objects).
    """
    type_set = set(types) if types else None
    exclude_set = set(exclude_types) if exclude_types else None
    role_set = set(roles) if roles else None

    result: list[Message] = []
    for message in messages:
        if type_set is not None and message.meta.type not in type_set:
            continue
        if exclude_set is not None and message.meta.type in exclude_set:
            continue
        if role_set is not None and message.role not in role_set:
            continue
        if only_unprocessed and not message.is_unprocessed():
            continue
        if predicate is not None and not predicate(message):
            continue
        result.append(message)

    if limit is not None and limit > 0:
        return result[:limit]
    return result


def select_file_messages(
    messages: list[Message], only_unprocessed: bool = False
) -> list[Message]:
    return select_messages(
        messages, types=[MessageType.FILE], only_unprocessed=only_unprocessed
    )


def select_context_messages(
    messages: list[Message], only_unprocessed: bool = False
) -> list[Message]:
    return select_messages(
        messages, types=[MessageType.CONTEXT], only_unprocessed=only_unprocessed
    )


def strip_metadata(messages: list[Message]) -> list[dict[str, str]]:
    """Convert to the plain role/content form sent to the model."""
    return [message.to_api() for message in messages]


def replace_content(
    message: Message, new_content: str, mark_processed: bool = True
) -> None:
    """Replace message content in place."""
    message.content = new_content
    if mark_processed:
        message.meta.processed = True


def replace_with_type(
    message: Message, new_content: str, new_type: MessageType
) -> None:
    """Replace content and retag the message as finished."""
    message.content = new_content
    message.meta.type = new_type
    message.meta.processed = True
    message.meta.needs_processing = False


def replace_span(
    messages: list[Message],
    start: int,
    count: int,
    replacement: list[Message],
) -> bool:
    """Replace ``messages[start:start + count]`` with ``replacement``.

    Args:
        messages: Owned, mutable sequence.
        start: First index of the span.
        count: Span length.
        replacement: Messages inserted in place of the span.

    Returns:
        False (and no change) if the span is invalid.
    """
    if start < 0 or start >= len(messages) or count < 1:
        return False
    messages[start : start + count] = replacement
    return True


def index_of(messages: list[Message], message: Message) -> int:
    """Find a message by identity; -1 if absent."""
    for index, candidate in enumerate(messages):
        if candidate is message:
            return index
    return -1


def find_message_range(
    messages: list[Message], message_type: MessageType
) -> tuple[int, int] | None:
    """Find the first contiguous run of a message type.

    Returns:
        (start, count), or None if the type does not occur.
    """
    start = next(
        (i for i, m in enumerate(messages) if m.meta.type == message_type), -1
    )
    if start == -1:
        return None

    count = 1
    for message in messages[start + 1 :]:
        if message.meta.type != message_type:
            break
        count += 1
    return start, count


def count_message_types(messages: list[Message]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for message in messages:
        key = message.meta.type.value
        counts[key] = counts.get(key, 0) + 1
    return counts


def total_chars(messages: Iterable[Message]) -> int:
    return sum(len(message.content) for message in messages)


def ensure_message_ids(messages: list[Message]) -> list[str]:
    """Assign a derived ID to every message lacking one.

    Args:
        messages: Context messages, oldest first. The index used for
            derivation is the position in this list.

    Returns:
        The message IDs, in order.
    """
    ids: list[str] = []
    for index, message in enumerate(messages):
        if not message.meta.message_id:
            message.meta.message_id = derive_message_id(index, message)
        ids.append(message.meta.message_id)
    return ids
