"""LLM Provider abstraction layer.

This module provides a unified interface for the upstream completion
service: an OpenAI-compatible AI gateway and Anthropic.
"""

from agent_network.llm.anthropic import AnthropicProvider
from agent_network.llm.base import BaseLLMProvider, LLMResponse
from agent_network.llm.factory import LLMProviderFactory
from agent_network.llm.gateway import GatewayProvider

__all__ = [
    "BaseLLMProvider",
    "LLMResponse",
    "AnthropicProvider",
    "GatewayProvider",
    "LLMProviderFactory",
]
