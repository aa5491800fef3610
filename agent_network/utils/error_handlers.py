"""Global error handlers for FastAPI application.

This module provides exception handlers that convert exceptions to standardized
API responses with appropriate HTTP status codes.
"""

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from .exceptions import (
    AgentOrchestratorError,
    APIError,
    ExternalServiceError,
)
from .logging import get_logger

logger = get_logger(__name__)


def create_error_response(
    status_code: int,
    error: str,
    message: str,
    details: dict[str, Any] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    """Create a standardized error response.

    Args:
        status_code: HTTP status code
        error: Error type/code
        message: Human-readable error message
        details: Optional additional error details
        request_id: Optional request ID for tracing

    Returns:
        JSONResponse with error information
    """
    content: dict[str, Any] = {
        "success": False,
        "error": message,
        "error_code": error,
    }

    if details:
        content["details"] = details

    if request_id:
        content["metadata"] = {"request_id": request_id}

    return JSONResponse(status_code=status_code, content=content)


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _format_validation_errors(errors: list[Any]) -> list[dict[str, Any]]:
    return [
        {
            "field": ".".join(str(x) for x in error["loc"]),
            "message": error["msg"],
            "type": error["type"],
        }
        for error in errors
    ]


async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle APIError exceptions."""
    logger.warning(
        "API error occurred",
        error=exc.__class__.__name__,
        message=exc.message,
        status_code=exc.status_code,
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=exc.status_code,
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details or None,
        request_id=_request_id(request),
    )


async def external_service_error_handler(
    request: Request, exc: ExternalServiceError
) -> JSONResponse:
    """Handle ExternalServiceError exceptions (upstream LLM or persistence store)."""
    logger.error(
        "External service error",
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=502,
        error=exc.__class__.__name__,
        message=exc.message,
        request_id=_request_id(request),
    )


async def orchestrator_error_handler(
    request: Request, exc: AgentOrchestratorError
) -> JSONResponse:
    """Handle general AgentOrchestratorError exceptions."""
    logger.error(
        "Orchestrator error occurred",
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details,
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=500,
        error=exc.__class__.__name__,
        message=exc.message,
        details=exc.details or None,
        request_id=_request_id(request),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle FastAPI RequestValidationError exceptions."""
    errors = _format_validation_errors(list(exc.errors()))

    logger.warning(
        "Request validation error",
        errors=errors,
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=422,
        error="ValidationError",
        message="Request validation failed",
        details={"validation_errors": errors},
        request_id=_request_id(request),
    )


async def pydantic_validation_error_handler(
    request: Request, exc: PydanticValidationError
) -> JSONResponse:
    """Handle Pydantic ValidationError exceptions."""
    errors = _format_validation_errors(list(exc.errors()))

    logger.warning(
        "Pydantic validation error",
        errors=errors,
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=422,
        error="ValidationError",
        message="Data validation failed",
        details={"validation_errors": errors},
        request_id=_request_id(request),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(
        "Unexpected error occurred",
        error=exc.__class__.__name__,
        message=str(exc),
        request_id=_request_id(request),
        path=str(request.url.path),
    )

    return create_error_response(
        status_code=500,
        error="InternalServerError",
        message="An unexpected error occurred",
        request_id=_request_id(request),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    # Most specific first
    app.add_exception_handler(APIError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(ExternalServiceError, external_service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AgentOrchestratorError, orchestrator_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(PydanticValidationError, pydantic_validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)

    logger.info("Error handlers registered")
