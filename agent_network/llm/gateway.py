"""OpenAI-compatible AI gateway provider.

This module provides chat completions through any gateway exposing the
OpenAI ``/chat/completions`` API (the default upstream completion service).
"""

from __future__ import annotations

import os
from typing import Any

import openai
from openai import AsyncOpenAI

from agent_network.llm.base import BaseLLMProvider, LLMResponse
from agent_network.utils.exceptions import LLMAPIError, LLMTimeoutError


class GatewayProvider(BaseLLMProvider):
    """AI gateway provider using the OpenAI-compatible interface."""

    BASE_URL = "https://ai.gateway.lovable.dev/v1"
    DEFAULT_MODEL = "google/gemini-3-flash-preview"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        default_model: str | None = None,
        timeout: float | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the gateway provider.

        Args:
            api_key: Gateway API key. If None, reads from AI_GATEWAY_API_KEY env var.
            base_url: Optional custom base URL. Defaults to the AI gateway.
            default_model: Model used when an agent does not override it.
            timeout: Client-side request timeout in seconds.
            **kwargs: Additional configuration.
        """
        resolved_api_key = api_key or os.getenv("AI_GATEWAY_API_KEY", "")
        super().__init__(api_key=resolved_api_key, **kwargs)

        self._base_url = base_url or self.BASE_URL
        self._default_model = default_model or self.DEFAULT_MODEL
        self._timeout = timeout

        # Retries are left to the caller; one request per invocation.
        self._async_client = AsyncOpenAI(
            api_key=resolved_api_key or "unset",
            base_url=self._base_url,
            max_retries=0,
            timeout=timeout,
        )

    @property
    def provider_name(self) -> str:
        """Return the provider name."""
        return "gateway"

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
        """Send a chat completion request to the gateway.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Model to use. If None, uses default_model.
            max_tokens: Maximum tokens in the response.
            temperature: Sampling temperature.
            system_prompt: Optional system prompt.
            **kwargs: Additional parameters.

        Returns:
            LLMResponse containing the generated text.

        Raises:
            LLMTimeoutError: If the request times out.
            LLMAPIError: On non-success status or transport failure.
        """
        used_model = model or self.default_model

        full_messages = []
        if system_prompt:
            full_messages.append({"role": "system", "content": system_prompt})
        full_messages.extend(messages)

        try:
            response = await self._async_client.chat.completions.create(
                model=used_model,
                messages=full_messages,  # type: ignore
                max_tokens=max_tokens,
                temperature=temperature,
                stream=False,
                **kwargs,
            )
        except openai.APITimeoutError as e:
            raise LLMTimeoutError(
                self._timeout or 0, provider=self.provider_name, cause=e
            ) from e
        except openai.APIStatusError as e:
            raise LLMAPIError(
                f"Gateway returned status {e.status_code}",
                provider=self.provider_name,
                model=used_model,
                status_code=e.status_code,
                cause=e,
            ) from e
        except openai.APIError as e:
            raise LLMAPIError(
                "Gateway request failed",
                provider=self.provider_name,
                model=used_model,
                cause=e,
            ) from e

        content = ""
        if response.choices:
            content = response.choices[0].message.content or ""

        usage = {}
        if response.usage:
            usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }

        return LLMResponse(
            content=content,
            model=response.model,
            usage=usage,
            finish_reason=response.choices[0].finish_reason if response.choices else None,
            raw_response=response,
        )
