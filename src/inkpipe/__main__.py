"""アプリケーションのエントリポイント"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import yaml

from inkpipe.application.services import Preprocessor
from inkpipe.application.use_cases import AgentEngine
from inkpipe.config import (
    Config,
    ConfigError,
    ConfigValidationError,
    LoggingConfig,
    load_config,
)
from inkpipe.domain.entities import (
    AttachedFile,
    CardPlacement,
    HistoryEntry,
    PromptCard,
    Role,
)
from inkpipe.domain.services import create_context, format_context_for_debug
from inkpipe.infrastructure.llm import (
    LLMClient,
    LLMContextSummarizer,
    LLMFileSummarizer,
)
from inkpipe.infrastructure.persistence import (
    DatabaseManager,
    InMemoryContextSummaryCache,
    SQLiteFileSummaryCache,
)

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    root_logger = logging.getLogger()
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def _load_yaml_list(path: Path, name: str) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f) or []
    if not isinstance(data, list):
        raise ConfigValidationError(f"{name} must be a list: {path}")
    for i, item in enumerate(data):
        if not isinstance(item, dict):
            raise ConfigValidationError(f"{name}[{i}] must be a mapping")
    return data


def load_history(path: Path) -> list[HistoryEntry]:
    """会話履歴 YAML を読み込む

    Args:
        path: ``[{role, content, message_id?}, ...]`` 形式のファイル

    Returns:
        会話履歴（古い順）

    Raises:
        ConfigValidationError: 形式が不正
    """
    entries: list[HistoryEntry] = []
    for i, item in enumerate(_load_yaml_list(path, "history")):
        try:
            role = Role(item.get("role", ""))
        except ValueError as e:
            raise ConfigValidationError(
                f"history[{i}].role is invalid: {item.get('role')!r}"
            ) from e
        entries.append(
            HistoryEntry(
                role=role,
                content=str(item.get("content", "")),
                message_id=item.get("message_id"),
            )
        )
    return entries


def load_cards(path: Path) -> list[PromptCard]:
    """プロンプトカード YAML を読み込む

    Args:
        path: ``[{id, title, content, placement?, priority?}, ...]`` 形式のファイル

    Returns:
        プロンプトカード一覧

    Raises:
        ConfigValidationError: 形式が不正
    """
    cards: list[PromptCard] = []
    for i, item in enumerate(_load_yaml_list(path, "cards")):
        if "content" not in item:
            raise ConfigValidationError(f"cards[{i}].content is required")
        try:
            placement = CardPlacement(item.get("placement", "after_system"))
        except ValueError as e:
            raise ConfigValidationError(
                f"cards[{i}].placement is invalid: {item.get('placement')!r}"
            ) from e
        cards.append(
            PromptCard(
                id=str(item.get("id", f"card-{i}")),
                title=str(item.get("title", "")),
                content=str(item["content"]),
                placement=placement,
                priority=item.get("priority"),
            )
        )
    return cards


def load_attachments(paths: list[Path]) -> list[AttachedFile]:
    """添付ファイルを読み込む"""
    files: list[AttachedFile] = []
    for path in paths:
        resolved = path.resolve()
        files.append(
            AttachedFile(
                content=resolved.read_text(encoding="utf-8"),
                name=resolved.name,
                path=str(resolved),
            )
        )
    return files


def build_engine(config: Config, db_manager: DatabaseManager) -> AgentEngine:
    """設定から AgentEngine を組み立てる

    Args:
        config: アプリケーション設定
        db_manager: ファイル要約キャッシュ用データベース

    Returns:
        AgentEngine インスタンス
    """
    debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
    preprocess_config = config.preprocessor

    file_summarizer = LLMFileSummarizer(
        LLMClient(
            config.llm_for("file_summary"), debug_llm_messages=debug_llm_messages
        ),
        SQLiteFileSummaryCache(db_manager.get_session),
        preprocess_config.file_summary,
    )
    context_summarizer = LLMContextSummarizer(
        LLMClient(
            config.llm_for("context_summary"), debug_llm_messages=debug_llm_messages
        ),
        InMemoryContextSummaryCache(),
        preprocess_config.context_summary,
    )
    preprocessor = Preprocessor(file_summarizer, context_summarizer, preprocess_config)

    return AgentEngine(
        LLMClient(config.llm_for("default"), debug_llm_messages=debug_llm_messages),
        preprocessor,
        config.engine,
        on_progress=lambda message, stage: logger.info("[%s] %s", stage.value, message),
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="inkpipe",
        description="Assemble a context, preprocess it and run one model turn.",
    )
    parser.add_argument("user_input", help="user request text")
    parser.add_argument(
        "--config", type=Path, default=Path("config.yaml"), help="config file"
    )
    parser.add_argument(
        "--file",
        dest="files",
        type=Path,
        action="append",
        default=[],
        help="attach a file (repeatable)",
    )
    parser.add_argument("--history", type=Path, help="conversation history YAML")
    parser.add_argument("--card-file", type=Path, help="prompt cards YAML")
    parser.add_argument(
        "--no-preprocess", action="store_true", help="skip file/context summarization"
    )
    return parser.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """1 ターン実行する

    Returns:
        終了コード
    """
    if not args.config.exists():
        logger.error("%s not found", args.config)
        return 1

    try:
        config = load_config(args.config)
        history = load_history(args.history) if args.history else []
        cards = load_cards(args.card_file) if args.card_file else []
        attachments = load_attachments(args.files)
    except (ConfigError, OSError) as e:
        logger.error("Failed to load input: %s", e)
        return 1

    configure_logging(config.logging)
    if args.no_preprocess:
        config.preprocessor.skip = True

    db_manager = DatabaseManager(config.cache.database_path)
    await db_manager.create_tables()
    try:
        engine = build_engine(config, db_manager)
        context = create_context(
            args.user_input,
            conversation_history=history,
            attached_contents=attachments,
            prompt_cards=cards,
            builder_config=config.builder,
        )
        logger.debug("Initial context:\n%s", format_context_for_debug(context))

        abort_event = asyncio.Event()
        try:
            result = await engine.run(context, abort_event)
        except asyncio.CancelledError:
            abort_event.set()
            raise
    finally:
        await db_manager.close()

    if not result.success:
        logger.error("Turn failed: %s", result.error)
        return 1

    print(result.final_answer)
    logger.info("Tokens used: %d", result.tokens_used)
    return 0


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    try:
        code = asyncio.run(run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
