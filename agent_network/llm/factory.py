"""LLM Provider Factory.

This module provides factory functions for creating LLM provider instances.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from agent_network.llm.anthropic import AnthropicProvider
from agent_network.llm.base import BaseLLMProvider
from agent_network.llm.gateway import GatewayProvider
from agent_network.utils.exceptions import InvalidConfigurationError

if TYPE_CHECKING:
    from agent_network.utils.config import AppConfig


class LLMProviderFactory:
    """Factory for creating LLM provider instances."""

    _providers: dict[str, type[BaseLLMProvider]] = {
        "gateway": GatewayProvider,
        "anthropic": AnthropicProvider,
    }

    @classmethod
    def register_provider(
        cls,
        name: str,
        provider_class: type[BaseLLMProvider],
    ) -> None:
        """Register a new LLM provider.

        Args:
            name: Provider name (e.g., 'openai', 'google').
            provider_class: Provider class implementing BaseLLMProvider.
        """
        cls._providers[name] = provider_class

    @classmethod
    def create(
        cls,
        provider: str = "gateway",
        api_key: str | None = None,
        **kwargs: Any,
    ) -> BaseLLMProvider:
        """Create an LLM provider instance.

        Args:
            provider: Provider name.
            api_key: API key. If None, the provider reads its environment variable.
            **kwargs: Additional provider-specific configuration.

        Returns:
            BaseLLMProvider instance.

        Raises:
            InvalidConfigurationError: If the provider is unknown.
        """
        if provider not in cls._providers:
            available = ", ".join(cls._providers.keys())
            raise InvalidConfigurationError(
                "llm.provider",
                provider,
                f"Unknown provider: {provider}. Available: {available}",
            )

        return cls._providers[provider](api_key=api_key, **kwargs)

    @classmethod
    def from_config(cls, config: AppConfig) -> BaseLLMProvider:
        """Create the provider selected by the application configuration.

        Args:
            config: Application configuration.

        Returns:
            BaseLLMProvider instance.
        """
        kwargs: dict[str, Any] = {
            "default_model": config.agent_defaults.model,
            "timeout": config.timeout.agent,
        }
        if config.llm.provider == "gateway":
            kwargs["base_url"] = config.gateway.base_url

        return cls.create(
            provider=config.llm.provider,
            api_key=config.completion_api_key or None,
            **kwargs,
        )

    @classmethod
    def list_providers(cls) -> list[str]:
        """List all registered provider names."""
        return list(cls._providers.keys())
