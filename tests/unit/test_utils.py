"""Unit tests for utility modules.

Tests for config, logging, exceptions, error_handlers, and observability.
"""

import os
import tempfile
from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from agent_network.utils.config import (
    AgentDefaults,
    AppConfig,
    AppSettings,
    Environment,
    LogFormat,
    LoggingConfig,
    SupabaseConfig,
    TimeoutConfig,
    get_config,
    init_config,
    reset_config,
)
from agent_network.utils.error_handlers import register_error_handlers
from agent_network.utils.exceptions import (
    AgentCatalogUnavailableError,
    AgentOrchestratorError,
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
from agent_network.utils.logging import (
    LoggerAdapter,
    clear_correlation_id,
    get_agent_logger,
    get_correlation_id,
    get_logger,
    get_session_logger,
    set_correlation_id,
    setup_logging,
)
from agent_network.utils.observability import (
    LangfuseClient,
    get_observability_client,
    init_observability,
    reset_observability,
)

# ============================================================================
# Config Tests
# ============================================================================


class TestAppSettings:
    """Tests for AppSettings model."""

    def test_default_values(self):
        """Test default values are set correctly."""
        settings = AppSettings()
        assert settings.env == Environment.DEVELOPMENT
        assert settings.debug is False
        assert settings.host == "0.0.0.0"
        assert settings.port == 8000

    def test_invalid_port(self):
        """Test invalid port raises error."""
        with pytest.raises(ValueError):
            AppSettings(port=0)
        with pytest.raises(ValueError):
            AppSettings(port=70000)


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_default_values(self):
        """Test default values."""
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.format == LogFormat.JSON

    def test_level_is_normalized(self):
        """Test lower-case levels are accepted."""
        assert LoggingConfig(level="debug").level == "DEBUG"

    def test_invalid_level(self):
        """Test invalid log level raises error."""
        with pytest.raises(ValueError):
            LoggingConfig(level="INVALID")


class TestAgentDefaults:
    """Tests for AgentDefaults model."""

    def test_default_values(self):
        """Test default values."""
        defaults = AgentDefaults()
        assert defaults.model == "google/gemini-3-flash-preview"
        assert defaults.max_tokens == 4096
        assert defaults.temperature == 0.7

    def test_temperature_validation(self):
        """Test temperature must be between 0.0 and 2.0."""
        AgentDefaults(temperature=0.0)
        AgentDefaults(temperature=2.0)
        with pytest.raises(ValueError):
            AgentDefaults(temperature=-0.1)
        with pytest.raises(ValueError):
            AgentDefaults(temperature=2.1)

    def test_max_tokens_validation(self):
        """Test max_tokens must be positive."""
        with pytest.raises(ValueError):
            AgentDefaults(max_tokens=0)


class TestTimeoutConfig:
    """Tests for TimeoutConfig model."""

    def test_default_values(self):
        """Test default per-agent timeout."""
        assert TimeoutConfig().agent == 120

    def test_invalid_timeout(self):
        """Test invalid timeout raises error."""
        with pytest.raises(ValueError):
            TimeoutConfig(agent=0)


class TestSupabaseConfig:
    """Tests for SupabaseConfig model."""

    def test_disabled_without_credentials(self):
        """Test the hosted store is off without both settings."""
        assert SupabaseConfig().enabled is False
        assert SupabaseConfig(url="https://x.supabase.co").enabled is False

    def test_enabled(self):
        """Test the hosted store is on with URL and key."""
        config = SupabaseConfig(url="https://x.supabase.co", service_key="k")
        assert config.enabled is True


class TestAppConfig:
    """Tests for AppConfig model."""

    def test_default_config(self):
        """Test default configuration."""
        config = AppConfig()
        assert config.app.env == Environment.DEVELOPMENT
        assert config.llm.provider == "gateway"
        assert config.orchestration.session_title_length == 100

    def test_completion_api_key(self):
        """Test the credential follows the selected provider."""
        config = AppConfig.model_validate(
            {"gateway": {"api_key": "gw"}, "anthropic": {"api_key": "an"}}
        )
        assert config.completion_api_key == "gw"

        config = AppConfig.model_validate(
            {
                "llm": {"provider": "anthropic"},
                "gateway": {"api_key": "gw"},
                "anthropic": {"api_key": "an"},
            }
        )
        assert config.completion_api_key == "an"

    def test_from_yaml(self):
        """Test loading from YAML file."""
        yaml_content = """
app:
  env: production
  port: 9000
logging:
  level: WARNING
  format: console
agent_defaults:
  model: openai/gpt-5-mini
  temperature: 0.5
timeout:
  agent: 60
"""
        with tempfile.TemporaryDirectory() as tmpdir:
            yaml_path = os.path.join(tmpdir, "test_config.yaml")
            with open(yaml_path, "w") as f:
                f.write(yaml_content)
            config = AppConfig.from_yaml(yaml_path)
            assert config.app.env == Environment.PRODUCTION
            assert config.app.port == 9000
            assert config.logging.format == LogFormat.CONSOLE
            assert config.agent_defaults.model == "openai/gpt-5-mini"
            assert config.timeout.agent == 60

    def test_from_yaml_file_not_found(self):
        """Test FileNotFoundError for missing YAML."""
        with pytest.raises(FileNotFoundError):
            AppConfig.from_yaml("/nonexistent/path.yaml")

    def test_from_yaml_not_a_mapping(self):
        """Test a YAML list is rejected."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yaml_path = os.path.join(tmpdir, "list.yaml")
            with open(yaml_path, "w") as f:
                f.write("- a\n- b\n")
            with pytest.raises(ValueError):
                AppConfig.from_yaml(yaml_path)

    def test_env_overrides(self):
        """Test environment variables override YAML values."""
        with patch.dict(
            os.environ,
            {
                "APP_ENV": "staging",
                "APP_DEBUG": "true",
                "APP_PORT": "5000",
                "LOG_LEVEL": "DEBUG",
                "AI_GATEWAY_API_KEY": "env-gw-key",
                "SUPABASE_URL": "https://x.supabase.co",
                "SUPABASE_SERVICE_ROLE_KEY": "service",
                "DEFAULT_TEMPERATURE": "0.9",
                "AGENT_TIMEOUT": "45",
                "LANGFUSE_ENABLED": "false",
            },
        ):
            config = AppConfig._apply_env_overrides(AppConfig())
            assert config.app.env == Environment.STAGING
            assert config.app.debug is True
            assert config.app.port == 5000
            assert config.logging.level == "DEBUG"
            assert config.gateway.api_key == "env-gw-key"
            assert config.supabase.enabled is True
            assert config.agent_defaults.temperature == 0.9
            assert config.timeout.agent == 45
            assert config.langfuse.enabled is False

    def test_load_bundled_config(self):
        """Test the bundled app.yaml loads."""
        config_path = os.path.join(
            os.path.dirname(__file__), "..", "..", "configs", "app.yaml"
        )
        config = AppConfig.from_yaml(config_path)
        assert config.orchestration.agents_dir == "configs/agents"
        assert config.agent_defaults.model == "google/gemini-3-flash-preview"


class TestGlobalConfig:
    """Tests for global config functions."""

    def setup_method(self):
        """Reset config before each test."""
        reset_config()

    def teardown_method(self):
        """Reset config after each test."""
        reset_config()

    def test_get_config_not_initialized(self):
        """Test get_config raises error when not initialized."""
        with pytest.raises(RuntimeError):
            get_config()

    def test_init_config(self):
        """Test init_config creates global config."""
        config = init_config()
        assert config is not None
        assert get_config() is config

    def test_reset_config(self):
        """Test reset_config clears global config."""
        init_config()
        reset_config()
        with pytest.raises(RuntimeError):
            get_config()


# ============================================================================
# Logging Tests
# ============================================================================


class TestLogging:
    """Tests for logging module."""

    def test_setup_logging_json(self):
        """Test JSON logging setup."""
        setup_logging(level="DEBUG", json_format=True)
        logger = get_logger("test")
        assert logger is not None

    def test_setup_logging_console(self):
        """Test console logging setup."""
        setup_logging(level="INFO", json_format=False)
        logger = get_logger("test")
        assert logger is not None

    def test_correlation_id(self):
        """Test correlation ID context."""
        clear_correlation_id()
        assert get_correlation_id() is None
        cid = set_correlation_id()
        assert cid is not None
        assert get_correlation_id() == cid
        clear_correlation_id()
        assert get_correlation_id() is None

    def test_set_specific_correlation_id(self):
        """Test setting a specific correlation ID."""
        cid = set_correlation_id("my-correlation-id")
        assert cid == "my-correlation-id"
        assert get_correlation_id() == "my-correlation-id"
        clear_correlation_id()


class TestLoggerAdapter:
    """Tests for LoggerAdapter class."""

    def setup_method(self):
        """Setup logging before tests."""
        setup_logging(level="DEBUG", json_format=True)

    def test_adapter_with_context(self):
        """Test adapter with initial context."""
        adapter = LoggerAdapter("test", session_id="s-1", request_id="abc")
        assert adapter._context == {"session_id": "s-1", "request_id": "abc"}

    def test_bind_context(self):
        """Test binding additional context."""
        adapter = LoggerAdapter("test", session_id="s-1")
        new_adapter = adapter.bind(agent_id="agent-code")
        assert new_adapter._context == {"session_id": "s-1", "agent_id": "agent-code"}
        assert adapter._context == {"session_id": "s-1"}

    def test_log_methods(self):
        """Test log methods do not raise."""
        adapter = LoggerAdapter("test", session_id="s-1")
        adapter.debug("debug event", n=1)
        adapter.info("info event")
        adapter.warning("warning event")
        adapter.error("error event")


class TestSpecializedLoggers:
    """Tests for specialized logger functions."""

    def test_get_agent_logger(self):
        """Test agent logger creation."""
        logger = get_agent_logger("agent-code", "code")
        assert logger._context == {"agent_id": "agent-code", "agent_role": "code"}

    def test_get_agent_logger_without_role(self):
        """Test agent logger without a role."""
        logger = get_agent_logger("agent-code")
        assert "agent_role" not in logger._context

    def test_get_session_logger(self):
        """Test session logger creation."""
        logger = get_session_logger("s-1")
        assert logger._context["session_id"] == "s-1"


# ============================================================================
# Exception Tests
# ============================================================================


class TestBaseException:
    """Tests for AgentOrchestratorError."""

    def test_basic_exception(self):
        """Test basic exception creation."""
        exc = AgentOrchestratorError("Test error")
        assert exc.message == "Test error"
        assert exc.details == {}
        assert exc.cause is None

    def test_to_dict(self):
        """Test exception to dict conversion."""
        exc = AgentOrchestratorError(
            "Test error",
            details={"key": "value"},
            cause=ValueError("cause"),
        )
        d = exc.to_dict()
        assert d["error"] == "AgentOrchestratorError"
        assert d["message"] == "Test error"
        assert d["details"] == {"key": "value"}
        assert d["cause"] == "cause"


class TestConfigurationErrors:
    """Tests for configuration exception classes."""

    def test_missing_configuration_error(self):
        """Test MissingConfigurationError."""
        exc = MissingConfigurationError("AI_GATEWAY_API_KEY")
        assert "AI_GATEWAY_API_KEY" in exc.message
        assert exc.config_key == "AI_GATEWAY_API_KEY"

    def test_missing_configuration_custom_message(self):
        """Test MissingConfigurationError with a custom message."""
        exc = MissingConfigurationError("KEY", "KEY is not configured")
        assert exc.message == "KEY is not configured"
        assert exc.details == {"config_key": "KEY"}

    def test_invalid_configuration_error(self):
        """Test InvalidConfigurationError."""
        exc = InvalidConfigurationError("PORT", "invalid")
        assert "PORT" in exc.message
        assert exc.value == "invalid"


class TestOrchestrationErrors:
    """Tests for orchestration exception classes."""

    def test_catalog_unavailable_default_message(self):
        """Test AgentCatalogUnavailableError default message."""
        exc = AgentCatalogUnavailableError()
        assert exc.message == "No active agents found"
        assert isinstance(exc, OrchestrationError)

    def test_catalog_unavailable_with_cause(self):
        """Test AgentCatalogUnavailableError keeps its cause."""
        cause = PersistenceError("fetch_active_agents")
        exc = AgentCatalogUnavailableError("Agent catalog unreachable", cause=cause)
        assert exc.cause is cause


class TestAPIErrors:
    """Tests for API exception classes."""

    def test_not_found_error(self):
        """Test NotFoundError."""
        exc = NotFoundError("Session", "s-1")
        assert exc.status_code == 404
        assert exc.message == "Session not found: s-1"

    def test_service_unavailable_error(self):
        """Test ServiceUnavailableError."""
        exc = ServiceUnavailableError("orchestrator")
        assert exc.status_code == 503
        assert exc.service_name == "orchestrator"


class TestExternalServiceErrors:
    """Tests for upstream and persistence exception classes."""

    def test_llm_api_error(self):
        """Test LLMAPIError."""
        exc = LLMAPIError("Gateway returned status 500", model="m", status_code=500)
        assert exc.details == {"provider": "gateway", "model": "m", "status_code": 500}
        assert isinstance(exc, ExternalServiceError)

    def test_llm_timeout_error(self):
        """Test LLMTimeoutError."""
        exc = LLMTimeoutError(30, provider="anthropic")
        assert exc.timeout_seconds == 30
        assert exc.status_code is None
        assert isinstance(exc, LLMAPIError)

    def test_persistence_error(self):
        """Test PersistenceError."""
        exc = PersistenceError("insert_collaboration")
        assert exc.operation == "insert_collaboration"
        assert "insert_collaboration" in exc.message


# ============================================================================
# Error Handler Tests
# ============================================================================


class _Payload(BaseModel):
    name: str


@pytest.fixture
def error_client() -> TestClient:
    """App with every error handler registered."""
    app = FastAPI()
    register_error_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError("Agent", "agent-x")

    @app.get("/upstream")
    async def upstream():
        raise LLMAPIError("Gateway returned status 500", status_code=500)

    @app.get("/fatal")
    async def fatal():
        raise AgentCatalogUnavailableError()

    @app.get("/boom")
    async def boom():
        raise RuntimeError("unexpected")

    @app.post("/validate")
    async def validate(payload: _Payload):
        return payload

    return TestClient(app, raise_server_exceptions=False)


class TestErrorHandlers:
    """Tests for the FastAPI error handlers."""

    def test_api_error(self, error_client: TestClient):
        """Test APIError maps to its status code."""
        response = error_client.get("/not-found")
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Agent not found: agent-x"
        assert body["error_code"] == "NotFoundError"

    def test_external_service_error(self, error_client: TestClient):
        """Test ExternalServiceError maps to 502."""
        response = error_client.get("/upstream")
        assert response.status_code == 502
        assert response.json()["error_code"] == "LLMAPIError"

    def test_orchestrator_error(self, error_client: TestClient):
        """Test fatal orchestration errors map to 500."""
        response = error_client.get("/fatal")
        assert response.status_code == 500
        assert response.json()["error"] == "No active agents found"

    def test_validation_error(self, error_client: TestClient):
        """Test request validation maps to 422."""
        response = error_client.post("/validate", json={})
        assert response.status_code == 422
        body = response.json()
        assert body["error_code"] == "ValidationError"
        assert body["details"]["validation_errors"]

    def test_unexpected_error(self, error_client: TestClient):
        """Test unexpected errors map to a generic 500."""
        response = error_client.get("/boom")
        assert response.status_code == 500
        assert response.json()["error"] == "An unexpected error occurred"


# ============================================================================
# Observability Tests
# ============================================================================


class TestLangfuseClient:
    """Tests for LangfuseClient class."""

    def setup_method(self):
        """Reset observability before each test."""
        reset_observability()

    def teardown_method(self):
        """Reset observability after each test."""
        reset_observability()

    def test_disabled_client(self):
        """Test disabled client does nothing."""
        client = LangfuseClient(enabled=False)
        assert client.enabled is False
        assert client.start_trace("trace_1", "test") is None
        client.log_generation("trace_1", "code", "m", [], "out")
        client.end_trace("trace_1")

    def test_client_without_credentials(self):
        """Test client without credentials is disabled."""
        client = LangfuseClient(enabled=True, public_key="", secret_key="")
        assert client.enabled is False

    def test_trace_lifecycle(self):
        """Test trace, generation and end calls reach Langfuse."""
        with patch("agent_network.utils.observability.Langfuse") as langfuse_cls:
            trace = MagicMock()
            langfuse_cls.return_value.trace.return_value = trace
            client = LangfuseClient(public_key="pk", secret_key="sk")

            trace_id = client.start_trace("t-1", "orchestrate", session_id="s-1")
            client.log_generation(
                trace_id, "code", "m", [{"role": "user", "content": "hi"}], "out"
            )
            client.end_trace(trace_id, output={"total_agents": 1})

        assert trace_id == "t-1"
        trace.generation.assert_called_once()
        assert trace.generation.call_args.kwargs["name"] == "code"
        trace.update.assert_called_once_with(
            output={"total_agents": 1}, session_id=None
        )

    def test_tracing_failures_are_swallowed(self):
        """Test Langfuse errors never propagate."""
        with patch("agent_network.utils.observability.Langfuse") as langfuse_cls:
            langfuse_cls.return_value.trace.side_effect = RuntimeError("down")
            client = LangfuseClient(public_key="pk", secret_key="sk")

            assert client.start_trace("t-1", "orchestrate") is None


class TestGlobalObservability:
    """Tests for global observability functions."""

    def setup_method(self):
        """Reset observability before each test."""
        reset_observability()

    def teardown_method(self):
        """Reset observability after each test."""
        reset_observability()

    def test_get_observability_client_not_initialized(self):
        """Test get_observability_client returns disabled client when not initialized."""
        client = get_observability_client()
        assert client is not None
        assert client.enabled is False

    def test_init_observability(self):
        """Test init_observability creates global client."""
        client = init_observability(enabled=False)
        assert client is not None
        assert get_observability_client() is client

    def test_reset_observability(self):
        """Test reset_observability clears global client."""
        init_observability(enabled=False)
        reset_observability()
        client = get_observability_client()
        # Should return a new disabled client
        assert client.enabled is False
