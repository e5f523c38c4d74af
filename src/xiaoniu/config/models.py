"""设定数据类"""

from dataclasses import dataclass


@dataclass
class OneBotConfig:
    """OneBot 反向 WebSocket 监听设定"""

    host: str = "0.0.0.0"
    port: int = 8080
    path: str = "/ws"


@dataclass
class IdentityConfig:
    """特殊身份设定（QQ 号，未设定为 0）"""

    bot_id: int
    master_id: int = 0
    partner_id: int = 0


@dataclass
class LLMConfig:
    """LLM 设定（传给 LiteLLM 的 acompletion）"""

    model: str
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: float = 60.0
    api_key: str | None = None
    api_base: str | None = None


@dataclass
class PersonaConfig:
    """人设与固定回复设定"""

    name: str = "小牛"
    master_name: str = "niuf"
    call_name: str = "小牛"
    command_keyword: str = "小牛"
    command_reply: str = "1"
    empty_mention_reply: str = "干嘛？艾特我又不说话，是不是想我了？"
    error_reply: str = "小牛有点累了，稍后再试吧..."
    fallback_answer: str = "我不知道该怎么回答呢。"


@dataclass
class MemoryConfig:
    """记忆设定

    Attributes:
        backend: 持久化后端（file / sqlite / memory）
        data_dir: file 后端的数据目录
        database_path: sqlite 后端的数据库路径
        max_history_messages: 私聊历史最多保留条数
        max_group_context_messages: 群聊上下文最多保留条数
        max_message_length: 超过此长度（字符数）的群消息不加入上下文
        repeat_window_size: 连续相同消息检测的窗口大小
        writer_queue_size: 持久化队列容量
    """

    backend: str = "file"
    data_dir: str = "data"
    database_path: str = "data/memory.db"
    max_history_messages: int = 50
    max_group_context_messages: int = 50
    max_message_length: int = 500
    repeat_window_size: int = 3
    writer_queue_size: int = 256


@dataclass
class LoggingConfig:
    """日志设定"""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """应用设定"""

    identities: IdentityConfig
    llm: dict[str, LLMConfig]
    onebot: OneBotConfig
    persona: PersonaConfig
    memory: MemoryConfig
    logging: LoggingConfig | None = None
