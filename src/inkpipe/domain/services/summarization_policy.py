"""Incremental context summarization policy.

Decides, from the live context messages and the cached summary, which span
(if any) has to be sent to the model. Summarizing twice with no new
messages is a no-op; after N new turns only the delta is summarized.
"""

import logging
from dataclasses import dataclass
from enum import Enum

from inkpipe.config.models import ContextSummaryConfig
from inkpipe.domain.entities.cache_entry import ContextSummaryCacheEntry
from inkpipe.domain.entities.message import Message
from inkpipe.domain.services.message_ops import ensure_message_ids, total_chars

logger = logging.getLogger(__name__)


class SummarizationAction(str, Enum):
    """What to do with the context messages."""

    SKIP = "skip"
    REUSE_CACHED = "reuse_cached"
    SUMMARIZE = "summarize"


@dataclass(frozen=True)
class SummarizationDecision:
    """Outcome of the summarization policy.

    Attributes:
        action: Action to take.
        new_start: First message not covered by the cached summary.
        cut_index: Messages before this index end up folded into the summary.
        reason: Short machine-readable reason, for logging.
        previous: Cached summary to extend (None for a fresh summary).
    """

    action: SummarizationAction
    new_start: int = 0
    cut_index: int = 0
    reason: str = ""
    previous: ContextSummaryCacheEntry | None = None


def find_last_position(ids: list[str], target: str | None) -> int | None:
    """Find the position of ``target`` scanning from the end."""
    if target is None:
        return None
    for position in range(len(ids) - 1, -1, -1):
        if ids[position] == target:
            return position
    return None


def decide_summarization(
    messages: list[Message],
    cached: ContextSummaryCacheEntry | None,
    config: ContextSummaryConfig,
) -> SummarizationDecision:
    """Decide how to summarize the context messages.

    Assigns a stable message ID to every message as a side effect.

    Args:
        messages: Context messages, oldest first.
        cached: Cached summary for the conversation, if any.
        config: Thresholds.

    Returns:
        The decision.
    """
    if len(messages) <= config.min_message_count:
        return SummarizationDecision(
            action=SummarizationAction.SKIP, reason="too_few_messages"
        )

    ids = ensure_message_ids(messages)
    cut_index = len(messages) - max(0, config.keep_recent_count)

    if cached is not None:
        position = find_last_position(ids, cached.last_message_id)
        if position is not None:
            new_start = position + 1
            new_slice = messages[new_start:cut_index]
            if (
                len(new_slice) <= config.min_message_count
                or total_chars(new_slice) < config.min_new_chars
            ):
                return SummarizationDecision(
                    action=SummarizationAction.REUSE_CACHED,
                    new_start=new_start,
                    cut_index=new_start,
                    reason="new_messages_below_threshold",
                    previous=cached,
                )
            return SummarizationDecision(
                action=SummarizationAction.SUMMARIZE,
                new_start=new_start,
                cut_index=cut_index,
                reason="incremental",
                previous=cached,
            )

        # The stale summary is dropped, not merged.
        logger.info(
            "Cached summary does not match live history (last id %s); "
            "falling back to a fresh summary",
            cached.last_message_id,
        )

    if cut_index <= 0:
        return SummarizationDecision(
            action=SummarizationAction.SKIP, reason="nothing_before_cut"
        )

    if total_chars(messages[:cut_index]) < config.min_new_chars:
        return SummarizationDecision(
            action=SummarizationAction.SKIP, reason="too_few_chars"
        )

    return SummarizationDecision(
        action=SummarizationAction.SUMMARIZE,
        new_start=0,
        cut_index=cut_index,
        reason="diverged" if cached is not None else "first_time",
    )
