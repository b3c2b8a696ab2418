"""Caller-supplied input entities."""

from dataclasses import dataclass
from enum import Enum

from inkpipe.domain.entities.message import Role


class CardPlacement(str, Enum):
    """Where a prompt card is inserted."""

    SYSTEM = "system"
    AFTER_SYSTEM = "after_system"
    USER_END = "user_end"


DEFAULT_CARD_PRIORITY = 50


@dataclass(frozen=True)
class PromptCard:
    """Reusable prompt snippet.

    Attributes:
        id: Card ID.
        title: Display title.
        content: Text inserted into the message sequence.
        placement: Insertion position.
        priority: Ordering among after_system items (higher first).
    """

    id: str
    title: str
    content: str
    placement: CardPlacement = CardPlacement.AFTER_SYSTEM
    priority: int | None = None

    @property
    def effective_priority(self) -> int:
        return self.priority or DEFAULT_CARD_PRIORITY


@dataclass(frozen=True)
class HistoryEntry:
    """One past turn of the conversation.

    Attributes:
        role: Chat role.
        content: Message text.
        message_id: Stable ID from the caller, if it has one.
    """

    role: Role
    content: str
    message_id: str | None = None


@dataclass(frozen=True)
class AttachedFile:
    """Structured attachment.

    Rendered into the text marker form when the message sequence is built.
    """

    content: str
    name: str | None = None
    path: str | None = None
