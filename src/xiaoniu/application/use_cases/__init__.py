"""Use cases."""

from xiaoniu.application.use_cases.ai_chat import AIChatUseCase
from xiaoniu.application.use_cases.local_command import LocalCommandUseCase
from xiaoniu.application.use_cases.relay_to_master import RelayToMasterUseCase

__all__ = [
    "AIChatUseCase",
    "LocalCommandUseCase",
    "RelayToMasterUseCase",
]
