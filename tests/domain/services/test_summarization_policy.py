"""Tests for the incremental summarization policy."""

import logging
from collections.abc import Callable

import pytest

from inkpipe.config import ContextSummaryConfig
from inkpipe.domain.entities import ContextSummaryCacheEntry, Message
from inkpipe.domain.services import SummarizationAction, decide_summarization
from inkpipe.domain.services.message_ops import ensure_message_ids
from inkpipe.domain.services.summarization_policy import find_last_position


@pytest.fixture
def config() -> ContextSummaryConfig:
    return ContextSummaryConfig()


class TestFirstTime:
    """Decisions without a cached summary."""

    def test_few_messages_skip(
        self, make_history: Callable[..., list[Message]], config: ContextSummaryConfig
    ) -> None:
        """Four messages never trigger a summary, however long."""
        decision = decide_summarization(make_history(4, 5000), None, config)

        assert decision.action == SummarizationAction.SKIP

    def test_short_history_skips(
        self, make_history: Callable[..., list[Message]], config: ContextSummaryConfig
    ) -> None:
        decision = decide_summarization(make_history(5, 300), None, config)

        assert decision.action == SummarizationAction.SKIP
        assert decision.reason == "too_few_chars"

    def test_summarizes_everything(
        self, make_history: Callable[..., list[Message]], config: ContextSummaryConfig
    ) -> None:
        messages = make_history(5, 500)

        decision = decide_summarization(messages, None, config)

        assert decision.action == SummarizationAction.SUMMARIZE
        assert (decision.new_start, decision.cut_index) == (0, 5)
        assert decision.previous is None
        assert decision.reason == "first_time"
        assert all(m.meta.message_id for m in messages)

    def test_keep_recent_moves_cut(
        self, make_history: Callable[..., list[Message]]
    ) -> None:
        decision = decide_summarization(
            make_history(10, 500), None, ContextSummaryConfig(keep_recent_count=2)
        )

        assert decision.action == SummarizationAction.SUMMARIZE
        assert decision.cut_index == 8


class TestWithCache:
    """Decisions against a cached summary."""

    def cached_for(
        self,
        messages: list[Message],
        count: int,
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
    ) -> ContextSummaryCacheEntry:
        return make_summary_entry(ensure_message_ids(messages)[:count])

    def test_nothing_new_reuses_cache(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
    ) -> None:
        messages = make_history(5, 500)
        cached = self.cached_for(messages, 5, make_summary_entry)

        decision = decide_summarization(messages, cached, config)

        assert decision.action == SummarizationAction.REUSE_CACHED
        assert decision.new_start == 5
        assert decision.previous is cached

    def test_incremental_delta(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
    ) -> None:
        """Only the messages after the cached one are summarized."""
        messages = make_history(10, 500)
        cached = self.cached_for(messages, 5, make_summary_entry)

        decision = decide_summarization(messages, cached, config)

        assert decision.action == SummarizationAction.SUMMARIZE
        assert (decision.new_start, decision.cut_index) == (5, 10)
        assert decision.previous is cached
        assert decision.reason == "incremental"

    def test_new_message_count_at_threshold_reuses(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
    ) -> None:
        """Four new messages are not enough, even when long."""
        messages = make_history(9, 1000)
        cached = self.cached_for(messages, 5, make_summary_entry)

        decision = decide_summarization(messages, cached, config)

        assert decision.action == SummarizationAction.REUSE_CACHED
        assert decision.new_start == 5

    @pytest.mark.parametrize(
        ("chars", "expected"),
        [
            (399, SummarizationAction.REUSE_CACHED),
            (400, SummarizationAction.SUMMARIZE),
        ],
    )
    def test_new_chars_threshold(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
        chars: int,
        expected: SummarizationAction,
    ) -> None:
        """Five new messages need at least 2000 characters together."""
        messages = make_history(5, 500) + make_history(5, chars)
        cached = self.cached_for(messages, 5, make_summary_entry)

        decision = decide_summarization(messages, cached, config)

        assert decision.action == expected

    def test_diverged_history_falls_back_to_fresh_summary(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """An unknown cached ID drops the stale summary and starts over."""
        messages = make_history(6, 500)
        cached = make_summary_entry(["ctx-from-another-branch"])

        with caplog.at_level(logging.INFO):
            decision = decide_summarization(messages, cached, config)

        assert decision.action == SummarizationAction.SUMMARIZE
        assert (decision.new_start, decision.cut_index) == (0, 6)
        assert decision.previous is None
        assert decision.reason == "diverged"
        assert "does not match live history" in caplog.text

    def test_diverged_short_history_skips(
        self,
        make_history: Callable[..., list[Message]],
        make_summary_entry: Callable[..., ContextSummaryCacheEntry],
        config: ContextSummaryConfig,
    ) -> None:
        decision = decide_summarization(
            make_history(6, 100), make_summary_entry(["ctx-unknown"]), config
        )

        assert decision.action == SummarizationAction.SKIP


class TestFindLastPosition:
    """find_last_position tests."""

    def test_scans_from_end(self) -> None:
        assert find_last_position(["a", "b", "a"], "a") == 2

    def test_missing(self) -> None:
        assert find_last_position(["a"], "z") is None
        assert find_last_position(["a"], None) is None
