"""Domain exceptions."""


class ReplyDeliveryError(Exception):
    """回复无法送达时发生的异常

    网关连接断开或写入失败时发生。
    """

    def __init__(self, target: str, message: str = "") -> None:
        """初始化

        Args:
            target: 目标描述（如 "group:123"）
            message: 错误信息（可选）
        """
        self.target = target
        super().__init__(message or f"Reply to {target} could not be delivered")
