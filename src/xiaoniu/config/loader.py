"""YAML 设定文件的读取与环境变量展开"""

import os
import re
from pathlib import Path
from typing import Any, TypeVar

import yaml

from xiaoniu.config.models import (
    Config,
    IdentityConfig,
    LLMConfig,
    LoggingConfig,
    MemoryConfig,
    OneBotConfig,
    PersonaConfig,
)


class ConfigError(Exception):
    """设定相关的基础异常"""


class ConfigValidationError(ConfigError):
    """设定值校验错误"""


class EnvironmentVariableError(ConfigError):
    """环境变量未设定"""


# 环境变量模式: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

MEMORY_BACKENDS = frozenset({"file", "sqlite", "memory"})

T = TypeVar("T")


def expand_env_vars(value: str) -> str:
    """将字符串中的 ${VAR_NAME} 替换为环境变量的值

    Args:
        value: 待替换的字符串

    Returns:
        展开环境变量后的字符串

    Raises:
        EnvironmentVariableError: 环境变量未设定
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
    """递归遍历数据结构，展开字符串中的环境变量

    Args:
        data: 展开对象（dict, list, str, 其他）

    Returns:
        展开环境变量后的数据
    """
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _validate_required_field(data: dict[str, Any], field: str, parent: str = "") -> Any:
    """校验必填字段是否存在

    Args:
        data: 校验对象
        field: 字段名
        parent: 父字段名（用于错误信息）

    Returns:
        字段的值

    Raises:
        ConfigValidationError: 字段不存在
    """
    if field not in data or data[field] is None:
        full_path = f"{parent}.{field}" if parent else field
        raise ConfigValidationError(f"Required field '{full_path}' is missing")
    return data[field]


def _as_identity(value: Any, path: str) -> int:
    """将 QQ 号转换为整数（空值视为未设定）

    Raises:
        ConfigValidationError: 不是整数
    """
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        raise ConfigValidationError(f"'{path}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigValidationError(f"'{path}' must be an integer: {value!r}") from e


def _build_section(cls: type[T], data: dict[str, Any], name: str) -> T:
    """用可选字段构建设定数据类

    Raises:
        ConfigValidationError: 存在未知字段
    """
    try:
        return cls(**data)
    except TypeError as e:
        raise ConfigValidationError(f"Invalid field in '{name}': {e}") from e


def load_config(path: str | Path) -> Config:
    """读取设定文件

    Args:
        path: config.yaml 的路径

    Returns:
        Config 对象

    Raises:
        FileNotFoundError: 文件不存在
        ConfigValidationError: 缺少必填项或值不合法
        EnvironmentVariableError: 环境变量未设定
        yaml.YAMLError: YAML 语法错误
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f) or {}

    # 展开环境变量
    data = _expand_recursive(raw_data)

    # 必填部分的校验
    identity_data = _validate_required_field(data, "identities")
    llm_data = _validate_required_field(data, "llm")

    # IdentityConfig
    bot_id = _as_identity(
        _validate_required_field(identity_data, "bot_id", "identities"),
        "identities.bot_id",
    )
    if bot_id <= 0:
        raise ConfigValidationError("'identities.bot_id' must be a positive integer")
    identities = IdentityConfig(
        bot_id=bot_id,
        master_id=_as_identity(
            identity_data.get("master_id"), "identities.master_id"
        ),
        partner_id=_as_identity(
            identity_data.get("partner_id"), "identities.partner_id"
        ),
    )

    # LLMConfig（default 必填）
    _validate_required_field(llm_data, "default", "llm")
    llm: dict[str, LLMConfig] = {}
    for key, llm_item in llm_data.items():
        model = _validate_required_field(llm_item, "model", f"llm.{key}")
        llm[key] = LLMConfig(
            model=model,
            temperature=llm_item.get("temperature", 0.7),
            max_tokens=llm_item.get("max_tokens", 1000),
            timeout=llm_item.get("timeout", 60.0),
            api_key=llm_item.get("api_key"),
            api_base=llm_item.get("api_base"),
        )

    # OneBotConfig（可选）
    onebot_data = data.get("onebot") or {}
    onebot = OneBotConfig(
        host=onebot_data.get("host", "0.0.0.0"),
        port=int(onebot_data.get("port", 8080)),
        path=onebot_data.get("path", "/ws"),
    )

    # PersonaConfig（可选，未指定的项使用默认值）
    persona_data = data.get("persona") or {}
    persona = _build_section(PersonaConfig, persona_data, "persona")

    # MemoryConfig（可选）
    memory_data = data.get("memory") or {}
    memory = _build_section(MemoryConfig, memory_data, "memory")
    if memory.backend not in MEMORY_BACKENDS:
        raise ConfigValidationError(
            f"'memory.backend' must be one of {sorted(MEMORY_BACKENDS)}, "
            f"got {memory.backend!r}"
        )

    # LoggingConfig（可选）
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
        identities=identities,
        llm=llm,
        onebot=onebot,
        persona=persona,
        memory=memory,
        logging=logging_config,
    )
