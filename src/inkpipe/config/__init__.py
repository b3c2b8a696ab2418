"""設定管理モジュール"""

from inkpipe.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
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

__all__ = [
    "BuilderConfig",
    "CacheConfig",
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "ContextSummaryConfig",
    "EngineConfig",
    "EnvironmentVariableError",
    "FileContentMode",
    "FileContentPlacement",
    "FileSummaryConfig",
    "LLMConfig",
    "LoggingConfig",
    "PreprocessorConfig",
    "expand_env_vars",
    "load_config",
]
