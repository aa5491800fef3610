"""API module.

Provides FastAPI routers, schemas, and dependencies.
"""

from .routes import (
    agent_router,
    api_router,
    dependencies_ready,
    health_router,
    init_dependencies,
    orchestration_router,
    reset_dependencies,
    session_router,
)
from .schemas import (
    AgentResponseSchema,
    AgentSchema,
    APIResponse,
    CodeContextSchema,
    CollaborationSchema,
    OrchestrateRequest,
    OrchestrateResponse,
    RequestContextSchema,
    SessionSchema,
)

__all__ = [
    # Routers
    "api_router",
    "orchestration_router",
    "agent_router",
    "session_router",
    "health_router",
    # Functions
    "init_dependencies",
    "reset_dependencies",
    "dependencies_ready",
    # Schemas - Common
    "APIResponse",
    # Schemas - Orchestration
    "OrchestrateRequest",
    "OrchestrateResponse",
    "RequestContextSchema",
    "CodeContextSchema",
    "AgentResponseSchema",
    # Schemas - Agent / Session
    "AgentSchema",
    "SessionSchema",
    "CollaborationSchema",
]
