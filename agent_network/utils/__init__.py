"""Utility modules for the agent network.

This package provides utility functions and classes for:
- Configuration management
- Structured logging
- Exception handling
- LLM observability (Langfuse)
"""

from .config import (
    AgentDefaults,
    AnthropicConfig,
    AppConfig,
    AppSettings,
    Environment,
    GatewayConfig,
    LangfuseConfig,
    LLMConfig,
    LogFormat,
    LoggingConfig,
    OrchestrationConfig,
    SupabaseConfig,
    TimeoutConfig,
    get_config,
    init_config,
    reset_config,
)
from .error_handlers import (
    create_error_response,
    register_error_handlers,
)
from .exceptions import (
    AgentCatalogUnavailableError,
    AgentOrchestratorError,
    APIError,
    ConfigurationError,
    ExternalServiceError,
    InvalidConfigurationError,
    LLMAPIError,
    LLMTimeoutError,
    MissingConfigurationError,
    NotFoundError,
    OrchestrationError,
    PersistenceError,
    ServiceUnavailableError,
)
from .logging import (
    LoggerAdapter,
    clear_correlation_id,
    get_agent_logger,
    get_correlation_id,
    get_logger,
    get_session_logger,
    set_correlation_id,
    setup_logging,
)
from .observability import (
    LangfuseClient,
    get_observability_client,
    init_observability,
    reset_observability,
    shutdown_observability,
)

__all__ = [
    # Config
    "AppConfig",
    "AppSettings",
    "LLMConfig",
    "GatewayConfig",
    "AnthropicConfig",
    "SupabaseConfig",
    "LoggingConfig",
    "AgentDefaults",
    "TimeoutConfig",
    "OrchestrationConfig",
    "LangfuseConfig",
    "Environment",
    "LogFormat",
    "get_config",
    "init_config",
    "reset_config",
    # Logging
    "setup_logging",
    "get_logger",
    "LoggerAdapter",
    "get_agent_logger",
    "get_session_logger",
    "get_correlation_id",
    "set_correlation_id",
    "clear_correlation_id",
    # Exceptions
    "AgentOrchestratorError",
    "ConfigurationError",
    "MissingConfigurationError",
    "InvalidConfigurationError",
    "OrchestrationError",
    "AgentCatalogUnavailableError",
    "APIError",
    "NotFoundError",
    "ServiceUnavailableError",
    "ExternalServiceError",
    "LLMAPIError",
    "LLMTimeoutError",
    "PersistenceError",
    # Error Handlers
    "register_error_handlers",
    "create_error_response",
    # Observability
    "LangfuseClient",
    "get_observability_client",
    "init_observability",
    "shutdown_observability",
    "reset_observability",
]
