"""LLM Observability with Langfuse.

This module provides integration with Langfuse for tracing orchestration
requests and the agent invocations they fan out to. Tracing never affects
the pipeline: every client call is guarded and only logged on failure.
"""

from typing import Any

from langfuse import Langfuse

from .logging import get_logger

logger = get_logger(__name__)


class LangfuseClient:
    """Wrapper for Langfuse client with graceful degradation.

    This class provides a unified interface for Langfuse operations,
    with graceful handling when Langfuse is disabled or misconfigured.
    """

    def __init__(
        self,
        public_key: str = "",
        secret_key: str = "",
        host: str = "https://cloud.langfuse.com",
        enabled: bool = True,
    ):
        """Initialize the Langfuse client.

        Args:
            public_key: Langfuse public key
            secret_key: Langfuse secret key
            host: Langfuse host URL
            enabled: Whether to enable Langfuse tracking
        """
        self.enabled = enabled
        self._client: Any = None
        self._traces: dict[str, Any] = {}

        if self.enabled and public_key and secret_key:
            try:
                self._client = Langfuse(
                    public_key=public_key,
                    secret_key=secret_key,
                    host=host,
                )
                logger.info("Langfuse client initialized", host=host)
            except Exception as e:
                logger.warning("Failed to initialize Langfuse client", error=str(e))
                self.enabled = False
        elif enabled:
            logger.debug("Langfuse credentials not provided, tracking disabled")
            self.enabled = False

    def start_trace(
        self,
        trace_id: str,
        name: str,
        metadata: dict[str, Any] | None = None,
        session_id: str | None = None,
        tags: list[str] | None = None,
    ) -> str | None:
        """Start a new trace for one orchestration request.

        Args:
            trace_id: Unique identifier for the trace
            name: Name of the trace
            metadata: Optional metadata to attach
            session_id: Optional orchestration session identifier
            tags: Optional tags for categorization

        Returns:
            The trace ID if successful, None otherwise
        """
        if not self.enabled or not self._client:
            return None

        try:
            trace = self._client.trace(
                id=trace_id,
                name=name,
                metadata=metadata or {},
                session_id=session_id,
                tags=tags or [],
            )
            self._traces[trace_id] = trace
            return trace_id
        except Exception as e:
            logger.warning("Failed to start trace", error=str(e), trace_id=trace_id)
            return None

    def log_generation(
        self,
        trace_id: str | None,
        name: str,
        model: str,
        input_messages: list[dict[str, Any]],
        output: str,
        usage: dict[str, int] | None = None,
        metadata: dict[str, Any] | None = None,
        level: str = "DEFAULT",
    ) -> None:
        """Log an LLM generation under an existing trace.

        Args:
            trace_id: Parent trace ID
            name: Name of the generation (agent name)
            model: Model name
            input_messages: Input messages sent to the LLM
            output: LLM output or degraded error text
            usage: Optional token usage
            metadata: Optional additional metadata
            level: Langfuse level (DEFAULT, WARNING, ERROR)
        """
        if not self.enabled or trace_id is None or trace_id not in self._traces:
            return

        try:
            self._traces[trace_id].generation(
                name=name,
                model=model,
                input=input_messages,
                output=output,
                usage=usage,
                metadata=metadata or {},
                level=level,
            )
        except Exception as e:
            logger.warning("Failed to log generation", error=str(e), trace_id=trace_id)

    def end_trace(
        self,
        trace_id: str | None,
        output: dict[str, Any] | None = None,
        session_id: str | None = None,
    ) -> None:
        """End a trace and record the final output.

        Args:
            trace_id: The trace ID to end
            output: Optional final output
            session_id: Session identifier resolved during the request
        """
        if not self.enabled or trace_id is None or trace_id not in self._traces:
            return

        try:
            trace = self._traces.pop(trace_id)
            trace.update(output=output, session_id=session_id)
        except Exception as e:
            logger.warning("Failed to end trace", error=str(e), trace_id=trace_id)

    def flush(self) -> None:
        """Flush any pending events to Langfuse."""
        if self.enabled and self._client:
            try:
                self._client.flush()
            except Exception as e:
                logger.warning("Failed to flush Langfuse events", error=str(e))

    def shutdown(self) -> None:
        """Shutdown the Langfuse client."""
        if self.enabled and self._client:
            try:
                self._client.shutdown()
                logger.info("Langfuse client shutdown")
            except Exception as e:
                logger.warning("Failed to shutdown Langfuse client", error=str(e))


# Global observability client instance
_observability_client: LangfuseClient | None = None


def get_observability_client() -> LangfuseClient:
    """Get the global observability client.

    Returns:
        The global LangfuseClient instance, or a disabled one if not initialized
    """
    if _observability_client is None:
        return LangfuseClient(enabled=False)
    return _observability_client


def init_observability(
    public_key: str = "",
    secret_key: str = "",
    host: str = "https://cloud.langfuse.com",
    enabled: bool = True,
) -> LangfuseClient:
    """Initialize the global observability client.

    Args:
        public_key: Langfuse public key
        secret_key: Langfuse secret key
        host: Langfuse host URL
        enabled: Whether to enable observability

    Returns:
        The initialized LangfuseClient instance
    """
    global _observability_client
    _observability_client = LangfuseClient(
        public_key=public_key,
        secret_key=secret_key,
        host=host,
        enabled=enabled,
    )
    return _observability_client


def shutdown_observability() -> None:
    """Shutdown the global observability client."""
    global _observability_client
    if _observability_client:
        _observability_client.shutdown()
        _observability_client = None


def reset_observability() -> None:
    """Reset the global observability client (mainly for testing)."""
    global _observability_client
    _observability_client = None
