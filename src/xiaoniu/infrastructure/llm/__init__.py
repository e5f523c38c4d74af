"""LLM integration."""

from xiaoniu.infrastructure.llm.client import LLMClient
from xiaoniu.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from xiaoniu.infrastructure.llm.prompt_builder import PromptBuilder

__all__ = [
    "LLMAuthenticationError",
    "LLMClient",
    "LLMError",
    "LLMRateLimitError",
    "LLMTimeoutError",
    "PromptBuilder",
]
