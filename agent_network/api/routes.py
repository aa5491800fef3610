"""API routes.

Routers for orchestration, the agent catalog, sessions and health.
Dependencies are wired once at startup through init_dependencies().
"""

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from agent_network.core.orchestrator import Orchestrator
from agent_network.core.registry import AgentRegistry
from agent_network.store.base import SessionStore
from agent_network.utils.exceptions import (
    AgentCatalogUnavailableError,
    MissingConfigurationError,
    NotFoundError,
    ServiceUnavailableError,
)
from agent_network.utils.logging import get_logger

from .schemas import (
    AgentSchema,
    APIResponse,
    CollaborationSchema,
    OrchestrateRequest,
    OrchestrateResponse,
    SessionSchema,
)

logger = get_logger(__name__)

# Wired by init_dependencies()
_orchestrator: Orchestrator | None = None
_registry: AgentRegistry | None = None
_session_store: SessionStore | None = None


def init_dependencies(
    orchestrator: Orchestrator,
    registry: AgentRegistry,
    session_store: SessionStore,
) -> None:
    """Wire the components the routes depend on."""
    global _orchestrator, _registry, _session_store
    _orchestrator = orchestrator
    _registry = registry
    _session_store = session_store


def reset_dependencies() -> None:
    """Clear wired components (mainly for shutdown and testing)."""
    global _orchestrator, _registry, _session_store
    _orchestrator = None
    _registry = None
    _session_store = None


def dependencies_ready() -> bool:
    return None not in (_orchestrator, _registry, _session_store)


def get_orchestrator() -> Orchestrator:
    if _orchestrator is None:
        raise ServiceUnavailableError("orchestrator")
    return _orchestrator


def get_registry() -> AgentRegistry:
    if _registry is None:
        raise ServiceUnavailableError("agent_registry")
    return _registry


def get_session_store() -> SessionStore:
    if _session_store is None:
        raise ServiceUnavailableError("session_store")
    return _session_store


def _dump(model: Any) -> dict[str, Any]:
    return model.model_dump(by_alias=True, mode="json", exclude_none=True)


# =============================================================================
# Orchestration
# =============================================================================

orchestration_router = APIRouter(tags=["Orchestration"])


@orchestration_router.post(
    "/orchestrate",
    response_model=OrchestrateResponse,
    response_model_exclude_none=True,
)
async def orchestrate(
    body: OrchestrateRequest,
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> Any:
    """Run the multi-agent pipeline for one message."""
    try:
        result = await orchestrator.run(body.to_domain())
    except (MissingConfigurationError, AgentCatalogUnavailableError) as e:
        logger.error("Orchestration aborted", error=type(e).__name__, message=e.message)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=OrchestrateResponse.failure(e.message).model_dump(
                by_alias=True, exclude_unset=True
            ),
        )

    return OrchestrateResponse.from_result(result)


# =============================================================================
# Agents
# =============================================================================

agent_router = APIRouter(prefix="/agents", tags=["Agents"])


@agent_router.get("", response_model=APIResponse)
async def list_agents(registry: AgentRegistry = Depends(get_registry)) -> APIResponse:
    """List the active agent catalog, ascending by priority."""
    catalog = await registry.list_active_agents()
    agents = [_dump(AgentSchema.from_domain(agent)) for agent in catalog]
    return APIResponse(success=True, data=agents, metadata={"count": len(agents)})


@agent_router.get("/{agent_id}", response_model=APIResponse)
async def get_agent(
    agent_id: str,
    registry: AgentRegistry = Depends(get_registry),
) -> APIResponse:
    """Get one active agent."""
    catalog = await registry.list_active_agents()
    agent = catalog.get(agent_id)
    if agent is None:
        raise NotFoundError("Agent", agent_id)
    return APIResponse(success=True, data=_dump(AgentSchema.from_domain(agent)))


# =============================================================================
# Sessions
# =============================================================================

session_router = APIRouter(prefix="/sessions", tags=["Sessions"])


@session_router.get("/{session_id}", response_model=APIResponse)
async def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> APIResponse:
    """Get a collaboration session."""
    session = await store.get_session(session_id)
    if session is None:
        raise NotFoundError("Session", session_id)
    return APIResponse(success=True, data=_dump(SessionSchema.from_domain(session)))


@session_router.get("/{session_id}/collaborations", response_model=APIResponse)
async def list_collaborations(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> APIResponse:
    """List a session's collaboration records in creation order."""
    session = await store.get_session(session_id)
    if session is None:
        raise NotFoundError("Session", session_id)

    records = await store.list_collaborations(session_id)
    data = [_dump(CollaborationSchema.from_domain(record)) for record in records]
    return APIResponse(success=True, data=data, metadata={"count": len(data)})


# =============================================================================
# Health
# =============================================================================

health_router = APIRouter(tags=["Health"])


@health_router.get("/health", response_model=APIResponse)
async def health_check(
    orchestrator: Orchestrator = Depends(get_orchestrator),
) -> APIResponse:
    """Report service and completion provider status."""
    provider = await orchestrator.invoker.provider.health_check()
    return APIResponse(
        success=True,
        data={"status": "healthy", "provider": provider},
    )


api_router = APIRouter(prefix="/api/v1")
api_router.include_router(orchestration_router)
api_router.include_router(agent_router)
api_router.include_router(session_router)
api_router.include_router(health_router)
