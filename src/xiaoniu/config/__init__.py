"""设定管理模块"""

from xiaoniu.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
)
from xiaoniu.config.models import (
    Config,
    IdentityConfig,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
    OneBotConfig,
    PersonaConfig,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "EnvironmentVariableError",
    "IdentityConfig",
    "LLMConfig",
    "LoggingConfig",
    "MemoryConfig",
    "OneBotConfig",
    "PersonaConfig",
    "expand_env_vars",
    "load_config",
]
