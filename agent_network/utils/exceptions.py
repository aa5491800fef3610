"""Custom exception classes for the agent network.

This module provides a unified exception hierarchy for the application.
Only the fatal orchestration errors cross the pipeline boundary; upstream
and persistence errors are raised by adapters and absorbed by the pipeline.
"""

from typing import Any


class AgentOrchestratorError(Exception):
    """Base exception for all agent network errors.

    All custom exceptions in this system should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error details
            cause: Optional original exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result: dict[str, Any] = {
            "error": self.__class__.__name__,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(AgentOrchestratorError):
    """Raised when there's a configuration error."""

    pass


class MissingConfigurationError(ConfigurationError):
    """Raised when a required configuration is missing."""

    def __init__(self, config_key: str, message: str | None = None):
        self.config_key = config_key
        msg = message or f"Missing required configuration: {config_key}"
        super().__init__(msg, details={"config_key": config_key})


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration value is invalid."""

    def __init__(self, config_key: str, value: Any, message: str | None = None):
        self.config_key = config_key
        self.value = value
        msg = message or f"Invalid configuration value for {config_key}: {value}"
        super().__init__(msg, details={"config_key": config_key, "value": str(value)})


# ============================================================================
# Orchestration Errors
# ============================================================================


class OrchestrationError(AgentOrchestratorError):
    """Base class for errors that abort a whole orchestration request."""

    pass


class AgentCatalogUnavailableError(OrchestrationError):
    """Raised when the agent catalog is unreachable or has no active agents."""

    def __init__(self, message: str = "No active agents found", cause: Exception | None = None):
        super().__init__(message, cause=cause)


# ============================================================================
# API Errors
# ============================================================================


class APIError(AgentOrchestratorError):
    """Base class for API-related errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message, details, cause)
        self.status_code = status_code


class NotFoundError(APIError):
    """Raised when a resource is not found (404)."""

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        message: str | None = None,
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        msg = message or f"{resource_type} not found: {resource_id}"
        super().__init__(
            msg,
            status_code=404,
            details={"resource_type": resource_type, "resource_id": resource_id},
        )


class ServiceUnavailableError(APIError):
    """Raised when a service is unavailable (503)."""

    def __init__(
        self,
        service_name: str,
        message: str | None = None,
    ):
        msg = message or f"Service unavailable: {service_name}"
        super().__init__(msg, status_code=503, details={"service": service_name})
        self.service_name = service_name


# ============================================================================
# LLM/External Service Errors
# ============================================================================


class ExternalServiceError(AgentOrchestratorError):
    """Base class for external service errors."""

    pass


class LLMAPIError(ExternalServiceError):
    """Raised when LLM API call fails."""

    def __init__(
        self,
        message: str,
        provider: str = "gateway",
        model: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ):
        details: dict[str, Any] = {"provider": provider}
        if model:
            details["model"] = model
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details, cause=cause)
        self.provider = provider
        self.model = model
        self.status_code = status_code


class LLMTimeoutError(LLMAPIError):
    """Raised when LLM API call times out."""

    def __init__(
        self,
        timeout_seconds: float,
        provider: str = "gateway",
        cause: Exception | None = None,
    ):
        super().__init__(
            f"LLM API call timed out after {timeout_seconds}s",
            provider=provider,
            cause=cause,
        )
        self.timeout_seconds = timeout_seconds
        self.details["timeout_seconds"] = timeout_seconds


class PersistenceError(ExternalServiceError):
    """Raised by a persistence store when a read or write fails."""

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        msg = message or f"Persistence operation failed: {operation}"
        super().__init__(msg, details={"operation": operation}, cause=cause)
        self.operation = operation
