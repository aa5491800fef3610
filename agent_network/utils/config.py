"""Application configuration management.

This module provides configuration loading from YAML files with
environment variable overrides.
"""

import os
from collections.abc import Callable
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator


class Environment(str, Enum):
    """Application environment types."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"
    TESTING = "testing"


class LogFormat(str, Enum):
    """Log output format types."""

    JSON = "json"
    CONSOLE = "console"


class AppSettings(BaseModel):
    """Application settings."""

    env: Environment = Field(
        default=Environment.DEVELOPMENT, description="Application environment"
    )
    debug: bool = Field(default=False, description="Debug mode")
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    name: str = Field(default="Agent Network", description="Application name")
    version: str = Field(default="1.0.0", description="Application version")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not 1 <= v <= 65535:
            raise ValueError("Port must be between 1 and 65535")
        return v


class LLMConfig(BaseModel):
    """Completion service selection."""

    provider: str = Field(
        default="gateway", description="Completion provider (gateway, anthropic)"
    )


class GatewayConfig(BaseModel):
    """OpenAI-compatible AI gateway configuration."""

    api_key: str = Field(default="", description="AI gateway API key")
    base_url: str = Field(
        default="https://ai.gateway.lovable.dev/v1", description="AI gateway base URL"
    )


class AnthropicConfig(BaseModel):
    """Anthropic API configuration."""

    api_key: str = Field(default="", description="Anthropic API key")


class SupabaseConfig(BaseModel):
    """Supabase (PostgREST) persistence configuration."""

    url: str = Field(default="", description="Supabase project URL")
    service_key: str = Field(default="", description="Supabase service role key")

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.service_key)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: LogFormat = Field(default=LogFormat.JSON, description="Log format")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper()
        if v_upper not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v_upper


class AgentDefaults(BaseModel):
    """Default completion settings for agents without overrides."""

    model: str = Field(
        default="google/gemini-3-flash-preview", description="Default LLM model"
    )
    max_tokens: int = Field(default=4096, description="Default max tokens")
    temperature: float = Field(default=0.7, description="Default temperature")

    @field_validator("temperature")
    @classmethod
    def validate_temperature(cls, v: float) -> float:
        if not 0.0 <= v <= 2.0:
            raise ValueError("Temperature must be between 0.0 and 2.0")
        return v

    @field_validator("max_tokens")
    @classmethod
    def validate_max_tokens(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("max_tokens must be positive")
        return v


class TimeoutConfig(BaseModel):
    """Timeout configuration."""

    agent: float = Field(default=120, description="Per-agent upstream call timeout (s)")

    @field_validator("agent")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v


class OrchestrationConfig(BaseModel):
    """Orchestration pipeline configuration."""

    session_title_length: int = Field(
        default=100, ge=1, description="Max length of a derived session title"
    )
    agents_dir: str = Field(
        default="configs/agents", description="Directory of YAML agent definitions"
    )


class LangfuseConfig(BaseModel):
    """Langfuse observability configuration."""

    enabled: bool = Field(default=False, description="Enable Langfuse")
    public_key: str = Field(default="", description="Langfuse public key")
    secret_key: str = Field(default="", description="Langfuse secret key")
    host: str = Field(
        default="https://cloud.langfuse.com", description="Langfuse host URL"
    )


def _as_bool(value: str) -> bool:
    return value.lower() == "true"


# (environment variable, section, key, caster)
_ENV_OVERRIDES: list[tuple[str, str, str, Callable[[str], Any]]] = [
    ("APP_ENV", "app", "env", str),
    ("APP_DEBUG", "app", "debug", _as_bool),
    ("APP_HOST", "app", "host", str),
    ("APP_PORT", "app", "port", int),
    ("LLM_PROVIDER", "llm", "provider", str),
    ("AI_GATEWAY_API_KEY", "gateway", "api_key", str),
    ("AI_GATEWAY_BASE_URL", "gateway", "base_url", str),
    ("ANTHROPIC_API_KEY", "anthropic", "api_key", str),
    ("SUPABASE_URL", "supabase", "url", str),
    ("SUPABASE_SERVICE_ROLE_KEY", "supabase", "service_key", str),
    ("LOG_LEVEL", "logging", "level", str),
    ("LOG_FORMAT", "logging", "format", str),
    ("DEFAULT_MODEL", "agent_defaults", "model", str),
    ("DEFAULT_MAX_TOKENS", "agent_defaults", "max_tokens", int),
    ("DEFAULT_TEMPERATURE", "agent_defaults", "temperature", float),
    ("AGENT_TIMEOUT", "timeout", "agent", float),
    ("SESSION_TITLE_LENGTH", "orchestration", "session_title_length", int),
    ("AGENTS_DIR", "orchestration", "agents_dir", str),
    ("LANGFUSE_ENABLED", "langfuse", "enabled", _as_bool),
    ("LANGFUSE_PUBLIC_KEY", "langfuse", "public_key", str),
    ("LANGFUSE_SECRET_KEY", "langfuse", "secret_key", str),
    ("LANGFUSE_HOST", "langfuse", "host", str),
]


class AppConfig(BaseModel):
    """Main application configuration."""

    app: AppSettings = Field(default_factory=AppSettings)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    agent_defaults: AgentDefaults = Field(default_factory=AgentDefaults)
    timeout: TimeoutConfig = Field(default_factory=TimeoutConfig)
    orchestration: OrchestrationConfig = Field(default_factory=OrchestrationConfig)
    langfuse: LangfuseConfig = Field(default_factory=LangfuseConfig)

    @property
    def completion_api_key(self) -> str:
        """API key of the selected completion provider."""
        if self.llm.provider == "anthropic":
            return self.anthropic.api_key
        return self.gateway.api_key

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            AppConfig instance populated from YAML

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            ValueError: If YAML content is invalid
        """
        path = Path(yaml_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {yaml_path}")

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict):
            raise ValueError("YAML content must be a dictionary")

        return cls.model_validate(data)

    @classmethod
    def load(
        cls,
        yaml_path: str | Path | None = None,
        env_file: str | Path | None = None,
    ) -> "AppConfig":
        """Load configuration with YAML as base and environment overrides.

        Environment variables take precedence over YAML settings.

        Args:
            yaml_path: Optional path to YAML configuration file
            env_file: Optional path to .env file

        Returns:
            AppConfig instance with merged configuration
        """
        config = cls.from_yaml(yaml_path) if yaml_path else cls()

        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        return cls._apply_env_overrides(config)

    @classmethod
    def _apply_env_overrides(cls, config: "AppConfig") -> "AppConfig":
        """Apply environment variable overrides to existing config."""
        data = config.model_dump()

        for env_var, section, key, caster in _ENV_OVERRIDES:
            value = os.getenv(env_var)
            if value:
                data[section][key] = caster(value)

        return cls.model_validate(data)


# Global configuration instance
_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get the global configuration instance.

    Returns:
        The global AppConfig instance

    Raises:
        RuntimeError: If configuration has not been initialized
    """
    if _config is None:
        raise RuntimeError("Configuration not initialized. Call init_config() first.")
    return _config


def init_config(
    yaml_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> AppConfig:
    """Initialize the global configuration.

    Args:
        yaml_path: Optional path to YAML configuration file
        env_file: Optional path to .env file

    Returns:
        The initialized AppConfig instance
    """
    global _config
    _config = AppConfig.load(yaml_path=yaml_path, env_file=env_file)
    return _config


def reset_config() -> None:
    """Reset the global configuration (mainly for testing)."""
    global _config
    _config = None
