"""File summary cache protocol."""

from typing import Protocol

from inkpipe.domain.entities.cache_entry import SummaryCacheResult


class FileSummaryCache(Protocol):
    """ファイル要約キャッシュ

    ファイルの絶対パスをキーとする。自動失効はなく、
    キャッシュが存在する限り信頼される。
    """

    async def read(self, file_path: str) -> SummaryCacheResult | None:
        """要約を読み込む

        Args:
            file_path: ファイルの絶対パス

        Returns:
            キャッシュ（存在しない場合は None）
        """
        ...

    async def write(self, file_path: str, content: str) -> None:
        """要約を保存（upsert）

        Args:
            file_path: ファイルの絶対パス
            content: 要約本文
        """
        ...

    async def delete(self, file_path: str) -> bool:
        """要約を削除（手動失効）

        Args:
            file_path: ファイルの絶対パス

        Returns:
            削除した場合 True
        """
        ...

    async def clear(self) -> int:
        """全要約を削除

        Returns:
            削除したレコード数
        """
        ...
