"""In-memory implementation of ContextSummaryCache."""

import logging

from inkpipe.domain.entities.cache_entry import ContextSummaryCacheEntry

logger = logging.getLogger(__name__)


class InMemoryContextSummaryCache:
    """インメモリ版 ContextSummaryCache 実装

    プロセスの生存期間だけ有効。保存時にメッセージをコピーし、
    呼び出し側の変更がキャッシュに波及しないようにする。
    """

    def __init__(self) -> None:
        self._entries: dict[str, ContextSummaryCacheEntry] = {}

    async def get(self, key: str) -> ContextSummaryCacheEntry | None:
        """キャッシュを取得

        Args:
            key: キャッシュキー

        Returns:
            キャッシュ（存在しない場合は None）
        """
        return self._entries.get(key)

    async def save(self, key: str, entry: ContextSummaryCacheEntry) -> None:
        """キャッシュを保存（上書き）

        Args:
            key: キャッシュキー
            entry: 保存するキャッシュ
        """
        self._entries[key] = ContextSummaryCacheEntry(
            summary_message=entry.summary_message.copy(),
            summarized_message_ids=tuple(entry.summarized_message_ids),
            total_chars=entry.total_chars,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )
        logger.debug(
            "Saved context summary for %s (%d messages)",
            key,
            len(entry.summarized_message_ids),
        )

    async def delete(self, key: str) -> None:
        """キャッシュを削除"""
        self._entries.pop(key, None)

    async def clear(self) -> None:
        """全キャッシュを削除"""
        self._entries.clear()
