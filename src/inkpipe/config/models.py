"""設定データクラス"""

from dataclasses import dataclass, field
from enum import Enum


class FileContentPlacement(str, Enum):
    """添付ファイルの配置位置"""

    APPEND = "append"
    AFTER_SYSTEM = "after_system"


class FileContentMode(str, Enum):
    """添付ファイルのメッセージ化方式"""

    MERGED = "merged"
    SEPARATE = "separate"


@dataclass
class LLMConfig:
    """LLM設定（LiteLLMのcompletionに渡すdict）"""

    model: str
    temperature: float = 0.7
    max_tokens: int | None = None


@dataclass
class BuilderConfig:
    """メッセージ構築設定

    Attributes:
        system_prompt: システムプロンプト（空なら省略）
        history_limit: 含める会話履歴の最大件数（0 以下は無制限）
        file_content_placement: 添付ファイルの配置位置
        file_content_mode: 添付ファイルを1件ずつ入れるか結合するか
        file_content_priority: after_system 配置時のファイル優先度
    """

    system_prompt: str = ""
    history_limit: int = 0
    file_content_placement: FileContentPlacement = FileContentPlacement.APPEND
    file_content_mode: FileContentMode = FileContentMode.MERGED
    file_content_priority: int = 10


@dataclass
class FileSummaryConfig:
    """ファイル要約設定"""

    system_prompt: str | None = None
    min_chars: int = 1000
    temperature: float = 0.3


@dataclass
class ContextSummaryConfig:
    """会話履歴要約設定

    Attributes:
        system_prompt: カスタムシステムプロンプト（None ならテンプレート）
        min_message_count: この件数以下の履歴は要約しない
        min_new_chars: 要約に必要な新規文字数
        keep_recent_count: 要約せずに残す最新メッセージ数
        cache_key: 要約キャッシュのキー
    """

    system_prompt: str | None = None
    min_message_count: int = 4
    min_new_chars: int = 2000
    keep_recent_count: int = 0
    cache_key: str = "default"


@dataclass
class PreprocessorConfig:
    """前処理設定"""

    skip: bool = False
    parallel_files: bool = True
    max_concurrency: int = 3
    file_summary: FileSummaryConfig = field(default_factory=FileSummaryConfig)
    context_summary: ContextSummaryConfig = field(
        default_factory=ContextSummaryConfig
    )


@dataclass
class EngineConfig:
    """最終生成設定"""

    temperature: float | None = None


@dataclass
class CacheConfig:
    """キャッシュ設定"""

    database_path: str = ":memory:"


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """アプリケーション設定"""

    llm: dict[str, LLMConfig]
    builder: BuilderConfig = field(default_factory=BuilderConfig)
    preprocessor: PreprocessorConfig = field(default_factory=PreprocessorConfig)
    engine: EngineConfig = field(default_factory=EngineConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig | None = None

    def llm_for(self, phase: str) -> LLMConfig:
        """フェーズ別の LLM 設定を返す（未設定なら default）"""
        return self.llm.get(phase, self.llm["default"])
