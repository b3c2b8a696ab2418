"""Message entity."""

import hashlib
from dataclasses import dataclass, field, replace
from enum import Enum


class Role(str, Enum):
    """Chat role of a message."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class MessageType(str, Enum):
    """Pipeline tag of a message.

    Every message in the working sequence carries exactly one type.
    """

    SYSTEM_PROMPT = "system_prompt"
    CONTEXT = "context"
    CONTEXT_SUMMARY = "context_summary"
    PROMPT_CARD = "prompt_card"
    FILE = "file"
    FILE_SUMMARY = "file_summary"
    USER_INPUT = "user_input"


@dataclass
class MessageMeta:
    """Processing metadata attached to a message.

    Attributes:
        type: Pipeline tag.
        needs_processing: Whether a preprocessing stage should look at it.
        processed: Once True, no further stage touches the message.
        priority: Insertion priority (after_system placement only).
        message_id: Stable identity used by incremental summarization.
        can_merge: Whether the message may be folded into a summary.
        title: Display-only title (prompt cards).
        file_index: Display-only index of the attached file.
        card_id: Display-only prompt card ID.
        file_name: Attached file name, when known.
        file_path: Absolute path of the attached file, when known.
    """

    type: MessageType
    needs_processing: bool = False
    processed: bool = False
    priority: int | None = None
    message_id: str | None = None
    can_merge: bool = False
    title: str | None = None
    file_index: int | None = None
    card_id: str | None = None
    file_name: str | None = None
    file_path: str | None = None


@dataclass
class Message:
    """Message entity.

    Attributes:
        role: Chat role.
        content: Text sent to the model.
        meta: Processing metadata (never sent to the model).
    """

    role: Role
    content: str
    meta: MessageMeta = field(
        default_factory=lambda: MessageMeta(type=MessageType.CONTEXT)
    )

    @property
    def type(self) -> MessageType:
        return self.meta.type

    def is_unprocessed(self) -> bool:
        """Check if this message still waits for preprocessing."""
        return self.meta.needs_processing and not self.meta.processed

    def to_api(self) -> dict[str, str]:
        """Convert to the OpenAI-format message dict."""
        return {"role": self.role.value, "content": self.content}

    def copy(self) -> "Message":
        """Return a copy that does not share its metadata."""
        return replace(self, meta=replace(self.meta))


def create_message(
    role: Role,
    content: str,
    message_type: MessageType,
    needs_processing: bool = False,
) -> Message:
    """Create a message; messages that need no processing start processed."""
    return Message(
        role=role,
        content=content,
        meta=MessageMeta(
            type=message_type,
            needs_processing=needs_processing,
            processed=not needs_processing,
        ),
    )


def derive_message_id(index: int, message: Message) -> str:
    """Derive a deterministic ID from position, role and content.

    The ID is stable across repeated passes over the same history as long
    as the content at that position is unchanged.
    """
    content = message.content
    seed = f"{index}:{message.role.value}:{content[:50]}:{len(content)}"
    return "ctx-" + hashlib.sha1(seed.encode("utf-8")).hexdigest()[:12]
