"""YAML設定ファイルの読み込みと環境変数展開"""

import os
import re
from enum import Enum
from pathlib import Path
from typing import Any, TypeVar

import yaml

from inkpipe.config.models import (
    BuilderConfig,
    CacheConfig,
    Config,
    ContextSummaryConfig,
    EngineConfig,
    FileContentMode,
    FileContentPlacement,
    FileSummaryConfig,
    LLMConfig,
    LoggingConfig,
    PreprocessorConfig,
)


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

E = TypeVar("E", bound=Enum)


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: 環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する"""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """必須フィールドの存在を検証する

    Args:
        data: 検証対象のdict
        field: フィールド名
        parent: 親フィールド名（エラーメッセージ用）

    Returns:
        フィールドの値

    Raises:
        ConfigValidationError: フィールドが存在しない
    """
    if field not in data or data[field] is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _section(data: dict[str, Any], name: str, parent: str = "") -> dict[str, Any]:
    """任意セクションを取得する（未指定なら空dict）"""
    section = data.get(name) or {}
    if not isinstance(section, dict):
        full_path = f"{parent}.{name}" if parent else name
        raise ConfigValidationError(f"Section '{full_path}' must be a mapping")
    return section


def _parse_enum(enum_cls: type[E], value: Any, field_path: str) -> E:
    """文字列を列挙型に変換する

    Raises:
        ConfigValidationError: 未知の値
    """
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ConfigValidationError(
            f"Invalid value '{value}' for '{field_path}' (allowed: {allowed})"
        ) from None


def _parse_llm(llm_data: dict[str, Any]) -> dict[str, LLMConfig]:
    # defaultは必須
    _validate_required_field(llm_data, "default", "llm")
    llm: dict[str, LLMConfig] = {}
    for key, llm_item in llm_data.items():
        model = _validate_required_field(llm_item, "model", f"llm.{key}")
        llm[key] = LLMConfig(
            model=model,
            temperature=llm_item.get("temperature", 0.7),
            max_tokens=llm_item.get("max_tokens"),
        )
    return llm


def _parse_builder(builder_data: dict[str, Any]) -> BuilderConfig:
    return BuilderConfig(
        system_prompt=builder_data.get("system_prompt") or "",
        history_limit=builder_data.get("history_limit", 0),
        file_content_placement=_parse_enum(
            FileContentPlacement,
            builder_data.get("file_content_placement", "append"),
            "builder.file_content_placement",
        ),
        file_content_mode=_parse_enum(
            FileContentMode,
            builder_data.get("file_content_mode", "merged"),
            "builder.file_content_mode",
        ),
        file_content_priority=builder_data.get("file_content_priority", 10),
    )


def _parse_preprocessor(data: dict[str, Any]) -> PreprocessorConfig:
    max_concurrency = data.get("max_concurrency", 3)
    if not isinstance(max_concurrency, int) or max_concurrency < 1:
        raise ConfigValidationError(
            "'preprocessor.max_concurrency' must be a positive integer"
        )

    file_data = _section(data, "file_summary", "preprocessor")
    context_data = _section(data, "context_summary", "preprocessor")

    return PreprocessorConfig(
        skip=data.get("skip", False),
        parallel_files=data.get("parallel_files", True),
        max_concurrency=max_concurrency,
        file_summary=FileSummaryConfig(
            system_prompt=file_data.get("system_prompt"),
            min_chars=file_data.get("min_chars", 1000),
            temperature=file_data.get("temperature", 0.3),
        ),
        context_summary=ContextSummaryConfig(
            system_prompt=context_data.get("system_prompt"),
            min_message_count=context_data.get("min_message_count", 4),
            min_new_chars=context_data.get("min_new_chars", 2000),
            keep_recent_count=context_data.get("keep_recent_count", 0),
            cache_key=context_data.get("cache_key", "default"),
        ),
    )


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 必須項目が欠落、または値が不正
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    # 環境変数を展開
    data = _expand_recursive(raw_data)

    llm = _parse_llm(_validate_required_field(data, "llm"))
    builder = _parse_builder(_section(data, "builder"))
    preprocessor = _parse_preprocessor(_section(data, "preprocessor"))

    engine_data = _section(data, "engine")
    engine = EngineConfig(temperature=engine_data.get("temperature"))

    cache_data = _section(data, "cache")
    cache = CacheConfig(database_path=cache_data.get("database_path", ":memory:"))

    # LoggingConfig (optional)
    logging_config: LoggingConfig | None = None
    logging_data = data.get("logging")
    if logging_data:
        logging_config = LoggingConfig(
            level=logging_data.get("level", "INFO"),
            format=logging_data.get(
                "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            ),
            loggers=logging_data.get("loggers"),
            debug_llm_messages=logging_data.get("debug_llm_messages", False),
        )

    return Config(
        llm=llm,
        builder=builder,
        preprocessor=preprocessor,
        engine=engine,
        cache=cache,
        logging=logging_config,
    )
