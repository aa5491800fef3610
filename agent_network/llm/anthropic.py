"""Anthropic LLM Provider implementation.

This module provides the Anthropic Claude API integration.
"""

from __future__ import annotations

import os
from typing import Any

import anthropic

from agent_network.llm.base import BaseLLMProvider, LLMResponse
from agent_network.utils.exceptions import LLMAPIError, LLMTimeoutError


class AnthropicProvider(BaseLLMProvider):
    """Anthropic Claude API provider.

    Provides access to Claude models through the Anthropic API.
    """

    DEFAULT_MODEL = "claude-haiku-4-5-20251001"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Anthropic provider.

        Args:
            api_key: Anthropic API key. If None, reads from ANTHROPIC_API_KEY env var.
            base_url: Optional custom base URL for the API.
            default_model: Model used when an agent does not override it.
            timeout: Client-side request timeout in seconds.
            **kwargs: Additional configuration.
        """
        resolved_api_key = api_key or os.getenv("ANTHROPIC_API_KEY", "")
        super().__init__(api_key=resolved_api_key, **kwargs)

        self._default_model = default_model or self.DEFAULT_MODEL
        self._timeout = timeout
        self._async_client = anthropic.AsyncAnthropic(
            api_key=resolved_api_key,
            base_url=base_url,
            max_retries=0,
            timeout=timeout,
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "anthropic"

    @property
    def default_model(self) -> str:
        """Return the default model."""
        return self._default_model

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        """Send a chat completion request to Anthropic.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Additional Anthropic-specific parameters.

        Returns:
            LLMResponse containing Claude's response.

        Raises:
            LLMTimeoutError: If the request times out.
            LLMAPIError: On non-success status or transport failure.
        """
        used_model = model or self.default_model

        request_params: dict[str, Any] = {
            "model": used_model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": messages,
        }

        if system_prompt:
            request_params["system"] = system_prompt

        request_params.update(kwargs)

        try:
            response = await self._async_client.messages.create(**request_params)
        except anthropic.APITimeoutError as e:
            raise LLMTimeoutError(
                self._timeout or 0, provider=self.provider_name, cause=e
            ) from e
        except anthropic.APIStatusError as e:
            raise LLMAPIError(
                f"Anthropic returned status {e.status_code}",
                provider=self.provider_name,
                model=used_model,
                status_code=e.status_code,
                cause=e,
            ) from e
        except anthropic.APIError as e:
            raise LLMAPIError(
                "Anthropic request failed",
                provider=self.provider_name,
                model=used_model,
                cause=e,
            ) from e

        content = ""
        if response.content:
            first_block = response.content[0]
            if hasattr(first_block, "text"):
                content = first_block.text

        return LLMResponse(
            content=content,
            model=response.model,
            usage={
                "input_tokens": response.usage.input_tokens,
                "output_tokens": response.usage.output_tokens,
            },
            finish_reason=response.stop_reason,
            raw_response=response,
        )
