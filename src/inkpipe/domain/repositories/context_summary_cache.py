"""Context summary cache protocol."""

from typing import Protocol

from inkpipe.domain.entities.cache_entry import ContextSummaryCacheEntry


class ContextSummaryCache(Protocol):
    """会話履歴要約キャッシュ

    会話ごとのキーで要約を保持する。1 ターン内で同じキーに
    書き込む要約処理は 1 つだけ。
    """

    async def get(self, key: str) -> ContextSummaryCacheEntry | None:
        """キャッシュを取得

        Args:
            key: キャッシュキー（通常は会話 ID）

        Returns:
            キャッシュ（存在しない場合は None）
        """
        ...

    async def save(self, key: str, entry: ContextSummaryCacheEntry) -> None:
        """キャッシュを保存

        Args:
            key: キャッシュキー
            entry: 保存するキャッシュ
        """
        ...

    async def delete(self, key: str) -> None:
        """キャッシュを削除

        Args:
            key: キャッシュキー
        """
        ...

    async def clear(self) -> None:
        """全キャッシュを削除"""
        ...
