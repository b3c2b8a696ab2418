"""Cache entry entities."""

from dataclasses import dataclass
from datetime import datetime

from inkpipe.domain.entities.message import Message


@dataclass(frozen=True)
class SummaryCacheResult:
    """ファイル要約キャッシュ

    ファイルの絶対パスをキーに永続化される。TTL はなく、
    呼び出し側が削除するまで有効。

    Attributes:
        content: 要約本文
        cached_at: キャッシュ日時
    """

    content: str
    cached_at: datetime


@dataclass(frozen=True)
class ContextSummaryCacheEntry:
    """会話履歴要約キャッシュ

    Attributes:
        summary_message: 要約メッセージ
        summarized_message_ids: 要約済みメッセージの ID 一覧（全件）
        total_chars: 要約済みメッセージの総文字数
        created_at: 作成日時
        updated_at: 更新日時
    """

    summary_message: Message
    summarized_message_ids: tuple[str, ...]
    total_chars: int
    created_at: datetime
    updated_at: datetime

    @property
    def last_message_id(self) -> str | None:
        if not self.summarized_message_ids:
            return None
        return self.summarized_message_ids[-1]
