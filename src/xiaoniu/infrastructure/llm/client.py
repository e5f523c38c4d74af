"""LLM client wrapper."""

import json
import logging
from typing import Any

import litellm
from litellm.exceptions import AuthenticationError, RateLimitError, Timeout

from xiaoniu.config import LLMConfig
from xiaoniu.infrastructure.llm.exceptions import (
    LLMAuthenticationError,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

logger = logging.getLogger(__name__)


class LLMClient:
    """Chat completion client over LiteLLM.

    Implements ``ChatCompleter``: one awaited ``acompletion`` per call, with
    the named LLM config applied and provider errors mapped to ``LLMError``
    subclasses. There is no retry; callers turn failures into an apology.
    """

    def __init__(self, config: LLMConfig, debug_messages: bool = False) -> None:
        """Initialize the client.

        Args:
            config: LLM configuration (model, temperature, max_tokens, etc.).
            debug_messages: Log full requests and answers at INFO level.
        """
        self._config = config
        self._debug_messages = debug_messages

    @property
    def model(self) -> str:
        return self._config.model

    def _build_params(
        self, messages: list[dict[str, str]], **kwargs: Any
    ) -> dict[str, Any]:
        params: dict[str, Any] = {
            "model": self._config.model,
            "temperature": self._config.temperature,
            "max_tokens": self._config.max_tokens,
            "timeout": self._config.timeout,
            "messages": messages,
        }
        if self._config.api_key:
            params["api_key"] = self._config.api_key
        if self._config.api_base:
            params["api_base"] = self._config.api_base
        params.update(kwargs)
        return params

    async def complete(
        self,
        messages: list[dict[str, str]],
        **kwargs: Any,
    ) -> str:
        """Execute chat completion.

        Args:
            messages: OpenAI-format message list.
                [{"role": "system", "content": "..."}, ...]
            **kwargs: Additional parameters (override config).

        Returns:
            Generated text, empty if the model returned no content.

        Raises:
            LLMAuthenticationError: Invalid API key.
            LLMRateLimitError: Rate limit exceeded.
            LLMTimeoutError: The call timed out.
            LLMError: Other API errors.
        """
        params = self._build_params(messages, **kwargs)

        logger.debug("LLM request: model=%s", params["model"])
        if self._debug_messages:
            logger.info(
                "LLM request messages:\n%s",
                json.dumps(messages, ensure_ascii=False, indent=2),
            )

        try:
            response = await litellm.acompletion(**params)
        except AuthenticationError as e:
            logger.error("LLM authentication error: %s", e)
            raise LLMAuthenticationError(str(e)) from e
        except RateLimitError as e:
            logger.warning("LLM rate limit exceeded: %s", e)
            raise LLMRateLimitError(str(e)) from e
        except Timeout as e:
            logger.warning("LLM request timed out: %s", e)
            raise LLMTimeoutError(str(e)) from e
        except Exception as e:
            logger.error("LLM error: %s", e)
            raise LLMError(str(e)) from e

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices else None
        logger.debug("LLM response received")
        if self._debug_messages:
            logger.info("LLM response: %s", content)
        return content or ""
