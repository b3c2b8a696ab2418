"""Message builder.

Assembles the initial tagged message sequence from the raw inputs of a
turn, applying card/file placement and priority rules.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import PurePath

from inkpipe.config.models import BuilderConfig, FileContentMode, FileContentPlacement
from inkpipe.domain.entities.inputs import (
    AttachedFile,
    CardPlacement,
    HistoryEntry,
    PromptCard,
)
from inkpipe.domain.entities.message import (
    Message,
    MessageMeta,
    MessageType,
    Role,
)
from inkpipe.domain.services.file_markers import format_attached_file, join_files

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildResult:
    """Output of the message builder.

    Attributes:
        messages: Tagged message sequence.
        raw_user_input: User text exactly as supplied.
    """

    messages: list[Message]
    raw_user_input: str


@dataclass
class _InsertItem:
    """Candidate for after_system insertion."""

    priority: int
    message_type: MessageType
    content: str
    meta: dict = field(default_factory=dict)


class MessageBuilder:
    """Builds the tagged message sequence for one turn."""

    def __init__(self, config: BuilderConfig | None = None) -> None:
        """Initialize the builder.

        Args:
            config: Placement, history and system prompt settings.
        """
        self._config = config or BuilderConfig()

    def build(
        self,
        user_input: str,
        conversation_history: Sequence[HistoryEntry] = (),
        attached_contents: Sequence[str | AttachedFile] = (),
        prompt_cards: Sequence[PromptCard] = (),
    ) -> BuildResult:
        """Build the message sequence.

        Order: system prompt, after_system cards and files (by descending
        priority), conversation history, user input.

        Args:
            user_input: Raw user text.
            conversation_history: Past turns, oldest first.
            attached_contents: File contents (marker text or AttachedFile).
            prompt_cards: Prompt cards to place.

        Returns:
            BuildResult with the messages and the raw user input.
        """
        messages: list[Message] = []
        placement = self._config.file_content_placement
        rendered_files = [self._render(item) for item in attached_contents]

        system_prompt = (self._config.system_prompt or "").strip()
        if system_prompt:
            messages.append(
                Message(
                    role=Role.SYSTEM,
                    content=system_prompt,
                    meta=MessageMeta(type=MessageType.SYSTEM_PROMPT, processed=True),
                )
            )

        if placement == FileContentPlacement.AFTER_SYSTEM:
            items = self._collect_after_system_items(
                prompt_cards, attached_contents, rendered_files
            )
            # sorted() is stable, so equal priorities keep insertion order
            for item in sorted(items, key=lambda i: -i.priority):
                is_file = item.message_type == MessageType.FILE
                messages.append(
                    Message(
                        role=Role.USER,
                        content=item.content,
                        meta=MessageMeta(
                            type=item.message_type,
                            needs_processing=is_file,
                            processed=not is_file,
                            priority=item.priority,
                            **item.meta,
                        ),
                    )
                )

        for entry in self._limit_history(conversation_history):
            messages.append(
                Message(
                    role=entry.role,
                    content=entry.content,
                    meta=MessageMeta(
                        type=MessageType.CONTEXT,
                        needs_processing=True,
                        can_merge=True,
                        message_id=entry.message_id,
                    ),
                )
            )

        self._apply_system_cards(messages, prompt_cards)

        messages.append(
            Message(
                role=Role.USER,
                content=self._build_user_content(
                    user_input, rendered_files, prompt_cards
                ),
                meta=MessageMeta(type=MessageType.USER_INPUT, processed=True),
            )
        )

        logger.debug(
            "Built %d messages (placement=%s, files=%d, history=%d)",
            len(messages),
            placement.value,
            len(rendered_files),
            len(conversation_history),
        )
        return BuildResult(messages=messages, raw_user_input=user_input)

    def _render(self, item: str | AttachedFile) -> str:
        if isinstance(item, AttachedFile):
            return format_attached_file(item)
        return item

    def _collect_after_system_items(
        self,
        prompt_cards: Sequence[PromptCard],
        attached_contents: Sequence[str | AttachedFile],
        rendered_files: list[str],
    ) -> list[_InsertItem]:
        items = [
            _InsertItem(
                priority=card.effective_priority,
                message_type=MessageType.PROMPT_CARD,
                content=card.content,
                meta={"title": card.title, "card_id": card.id},
            )
            for card in prompt_cards
            if card.placement == CardPlacement.AFTER_SYSTEM
        ]

        if not rendered_files:
            return items

        file_priority = self._config.file_content_priority
        if self._config.file_content_mode == FileContentMode.SEPARATE:
            for index, (original, content) in enumerate(
                zip(attached_contents, rendered_files)
            ):
                if not content.strip():
                    continue
                meta: dict = {"file_index": index}
                if isinstance(original, AttachedFile):
                    meta["file_path"] = original.path
                    meta["file_name"] = original.name or (
                        PurePath(original.path).name if original.path else None
                    )
                items.append(
                    _InsertItem(
                        priority=file_priority,
                        message_type=MessageType.FILE,
                        content=content,
                        meta=meta,
                    )
                )
        else:
            items.append(
                _InsertItem(
                    priority=file_priority,
                    message_type=MessageType.FILE,
                    content=join_files(rendered_files),
                )
            )
        return items

    def _limit_history(
        self, conversation_history: Sequence[HistoryEntry]
    ) -> Sequence[HistoryEntry]:
        limit = self._config.history_limit
        if limit > 0:
            return conversation_history[-limit:]
        return conversation_history

    def _apply_system_cards(
        self, messages: list[Message], prompt_cards: Sequence[PromptCard]
    ) -> None:
        system_cards = [
            card for card in prompt_cards if card.placement == CardPlacement.SYSTEM
        ]
        if not system_cards:
            return

        system_content = "\n\n".join(card.content for card in system_cards)
        if messages and messages[0].role == Role.SYSTEM:
            messages[0].content += "\n\n" + system_content
        else:
            messages.insert(
                0,
                Message(
                    role=Role.SYSTEM,
                    content=system_content,
                    meta=MessageMeta(type=MessageType.SYSTEM_PROMPT, processed=True),
                ),
            )

    def _build_user_content(
        self,
        user_input: str,
        rendered_files: list[str],
        prompt_cards: Sequence[PromptCard],
    ) -> str:
        content = user_input.strip()

        if (
            self._config.file_content_placement == FileContentPlacement.APPEND
            and rendered_files
        ):
            content += "\n\n" + join_files(rendered_files)

        user_end_cards = [
            card for card in prompt_cards if card.placement == CardPlacement.USER_END
        ]
        if user_end_cards:
            content += "\n\n" + "\n\n".join(card.content for card in user_end_cards)

        return content
