"""Core orchestration components."""

from .context import ResponseAccumulator
from .orchestrator import MAX_COLLABORATION_ROUNDS, Orchestrator, build_summary
from .recorder import CollaborationRecorder, PersistenceResult, PersistenceStatus
from .registry import AgentCatalog, AgentRegistry
from .router import (
    CODE_CONTEXT_ROLES,
    DEFAULT_ROLE,
    DEFAULT_ROLE_KEYWORDS,
    RelevanceRouter,
)

__all__ = [
    "Orchestrator",
    "MAX_COLLABORATION_ROUNDS",
    "build_summary",
    "AgentCatalog",
    "AgentRegistry",
    "RelevanceRouter",
    "DEFAULT_ROLE_KEYWORDS",
    "CODE_CONTEXT_ROLES",
    "DEFAULT_ROLE",
    "ResponseAccumulator",
    "CollaborationRecorder",
    "PersistenceResult",
    "PersistenceStatus",
]
