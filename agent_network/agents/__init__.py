"""Agent invocation and catalog loading."""

from .invoker import (
    DEGRADED_RESPONSE_PREFIX,
    AgentInvoker,
    build_system_prompt,
    build_user_message,
    describe_failure,
)
from .loader import AgentConfigError, AgentLoader, AgentLoadError, validate_yaml_schema
from .suggestions import (
    DEFAULT_SUGGESTION_TRIGGERS,
    KeywordSuggestionExtractor,
    SuggestionExtractor,
)

__all__ = [
    "AgentInvoker",
    "DEGRADED_RESPONSE_PREFIX",
    "build_system_prompt",
    "build_user_message",
    "describe_failure",
    "AgentLoader",
    "AgentLoadError",
    "AgentConfigError",
    "validate_yaml_schema",
    "SuggestionExtractor",
    "KeywordSuggestionExtractor",
    "DEFAULT_SUGGESTION_TRIGGERS",
]
