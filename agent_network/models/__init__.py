"""Data models package.

This module defines all data models used in the agent network.
"""

from .agent import (
    AgentDefinition,
    AgentResponse,
    AgentRole,
)
from .orchestration import (
    CodeContext,
    OrchestrationRequest,
    OrchestrationResult,
    RequestContext,
)
from .session import (
    CollaborationRecord,
    CollaborationStatus,
    RequestKind,
    Session,
    SessionStage,
)

__all__ = [
    # Agent models
    "AgentDefinition",
    "AgentResponse",
    "AgentRole",
    # Session models
    "CollaborationRecord",
    "CollaborationStatus",
    "RequestKind",
    "Session",
    "SessionStage",
    # Orchestration models
    "CodeContext",
    "OrchestrationRequest",
    "OrchestrationResult",
    "RequestContext",
]
