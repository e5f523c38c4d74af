"""Tests for LLMClient."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from litellm.exceptions import AuthenticationError, RateLimitError, Timeout

from xiaoniu.config import LLMConfig
from xiaoniu.infrastructure.llm import (
    LLMAuthenticationError,
    LLMClient,
    LLMError,
    LLMRateLimitError,
    LLMTimeoutError,
)

MESSAGES = [{"role": "user", "content": "你好"}]


class TestLLMClient:
    """LLMClient tests."""

    @pytest.fixture
    def config(self) -> LLMConfig:
        """Create LLM config."""
        return LLMConfig(
            model="deepseek/deepseek-chat",
            temperature=0.7,
            max_tokens=1000,
            timeout=30.0,
        )

    @pytest.fixture
    def client(self, config: LLMConfig) -> LLMClient:
        """Create LLMClient instance."""
        return LLMClient(config=config)

    @pytest.fixture
    def mock_response(self) -> MagicMock:
        """Create mock LiteLLM response."""
        response = MagicMock()
        response.choices = [MagicMock()]
        response.choices[0].message.content = "你好呀，有什么事吗？"
        return response

    async def test_complete_success(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test successful completion."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            result = await client.complete(MESSAGES)

            assert result == "你好呀，有什么事吗？"
            mock_completion.assert_awaited_once()

    async def test_complete_applies_config(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that config parameters are applied."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES)

            call_kwargs = mock_completion.call_args.kwargs
            assert call_kwargs["model"] == "deepseek/deepseek-chat"
            assert call_kwargs["temperature"] == 0.7
            assert call_kwargs["max_tokens"] == 1000
            assert call_kwargs["timeout"] == 30.0
            assert call_kwargs["messages"] == MESSAGES
            assert "api_key" not in call_kwargs
            assert "api_base" not in call_kwargs

    async def test_complete_passes_credentials(self, mock_response: MagicMock) -> None:
        """Test that api_key and api_base are forwarded when set."""
        client = LLMClient(
            LLMConfig(
                model="openai/gpt-4o",
                api_key="sk-test",
                api_base="https://llm.example.com/v1",
            )
        )
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES)

            call_kwargs = mock_completion.call_args.kwargs
            assert call_kwargs["api_key"] == "sk-test"
            assert call_kwargs["api_base"] == "https://llm.example.com/v1"

    async def test_complete_kwargs_override(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that kwargs can override config."""
        with patch(
            "litellm.acompletion", new=AsyncMock(return_value=mock_response)
        ) as mock_completion:
            await client.complete(MESSAGES, max_tokens=500, temperature=0.5)

            call_kwargs = mock_completion.call_args.kwargs
            assert call_kwargs["max_tokens"] == 500
            assert call_kwargs["temperature"] == 0.5

    async def test_complete_none_content(
        self, client: LLMClient, mock_response: MagicMock
    ) -> None:
        """Test that missing content becomes an empty string."""
        mock_response.choices[0].message.content = None
        with patch("litellm.acompletion", new=AsyncMock(return_value=mock_response)):
            assert await client.complete(MESSAGES) == ""

    async def test_complete_no_choices(self, client: LLMClient) -> None:
        response = MagicMock()
        response.choices = []
        with patch("litellm.acompletion", new=AsyncMock(return_value=response)):
            assert await client.complete(MESSAGES) == ""

    async def test_complete_authentication_error(self, client: LLMClient) -> None:
        """Test that authentication errors are converted."""
        error = AuthenticationError(
            message="Invalid API key",
            llm_provider="openai",
            model="gpt-4o",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMAuthenticationError):
                await client.complete(MESSAGES)

    async def test_complete_rate_limit_error(self, client: LLMClient) -> None:
        """Test that rate limit errors are converted."""
        error = RateLimitError(
            message="Rate limit exceeded",
            llm_provider="openai",
            model="gpt-4o",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMRateLimitError):
                await client.complete(MESSAGES)

    async def test_complete_timeout_error(self, client: LLMClient) -> None:
        """Test that timeouts are converted."""
        error = Timeout(
            message="Request timed out",
            model="gpt-4o",
            llm_provider="openai",
        )
        with patch("litellm.acompletion", new=AsyncMock(side_effect=error)):
            with pytest.raises(LLMTimeoutError):
                await client.complete(MESSAGES)

    async def test_complete_generic_error(self, client: LLMClient) -> None:
        """Test that other errors are converted to LLMError."""
        with patch(
            "litellm.acompletion", new=AsyncMock(side_effect=Exception("Unknown error"))
        ):
            with pytest.raises(LLMError):
                await client.complete(MESSAGES)

    def test_model(self, client: LLMClient) -> None:
        assert client.model == "deepseek/deepseek-chat"
