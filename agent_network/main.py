"""Agent Network - Main Application Entry Point.

This module creates and configures the FastAPI application with all necessary
middleware, routers, and startup/shutdown handlers.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from agent_network.agents.invoker import AgentInvoker
from agent_network.agents.loader import AgentLoader, AgentLoadError
from agent_network.api.routes import (
    api_router,
    dependencies_ready,
    init_dependencies,
    reset_dependencies,
)
from agent_network.core.orchestrator import Orchestrator
from agent_network.core.recorder import CollaborationRecorder
from agent_network.core.registry import AgentRegistry
from agent_network.core.router import RelevanceRouter
from agent_network.llm import LLMProviderFactory
from agent_network.models import AgentDefinition
from agent_network.store import InMemoryStore, SupabaseStore
from agent_network.utils.config import (
    AppConfig,
    Environment,
    LogFormat,
    get_config,
    init_config,
)
from agent_network.utils.error_handlers import register_error_handlers
from agent_network.utils.logging import (
    clear_correlation_id,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from agent_network.utils.observability import init_observability, shutdown_observability

# Global instances
_store: InMemoryStore | SupabaseStore | None = None
_orchestrator: Orchestrator | None = None

logger = get_logger(__name__)


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def get_config_path() -> Path:
    """Get the path to the app.yaml configuration file."""
    return get_project_root() / "configs" / "app.yaml"


def get_agents_config_path(config: AppConfig) -> Path:
    """Resolve the agent definitions directory (relative to the project root)."""
    agents_dir = Path(config.orchestration.agents_dir)
    if not agents_dir.is_absolute():
        agents_dir = get_project_root() / agents_dir
    return agents_dir


def load_agents_from_config(config: AppConfig) -> list[AgentDefinition]:
    """Load agent definitions from YAML configuration files.

    Returns:
        Loaded definitions; empty if the directory is missing or unusable.
    """
    agents_dir = get_agents_config_path(config)

    if not agents_dir.is_dir():
        logger.info(
            "Agents configuration directory not found, skipping auto-load",
            path=str(agents_dir),
        )
        return []

    try:
        agents = AgentLoader().load_all_from_directory(agents_dir)
    except AgentLoadError as e:
        logger.warning(
            "Failed to load agents from directory",
            path=str(agents_dir),
            error=str(e),
        )
        return []

    for agent in agents:
        logger.info(
            "Agent definition loaded",
            agent_id=agent.id,
            agent_name=agent.name,
            role=agent.role,
        )
    return agents


def build_store(config: AppConfig) -> InMemoryStore | SupabaseStore:
    """Create the catalog/session store selected by configuration."""
    if config.supabase.enabled:
        logger.info("Using Supabase store", url=config.supabase.url)
        return SupabaseStore(config.supabase.url, config.supabase.service_key)

    logger.info("Using in-memory store")
    return InMemoryStore(load_agents_from_config(config))


def build_orchestrator(
    config: AppConfig,
    store: InMemoryStore | SupabaseStore,
) -> Orchestrator:
    """Assemble the orchestration pipeline from configuration."""
    provider = LLMProviderFactory.from_config(config)
    if not provider.is_configured:
        logger.warning(
            "Completion provider has no credential; orchestration requests will fail",
            provider=provider.provider_name,
        )

    return Orchestrator(
        registry=AgentRegistry(store),
        router=RelevanceRouter(),
        invoker=AgentInvoker(
            provider,
            defaults=config.agent_defaults,
            timeout=config.timeout.agent,
        ),
        recorder=CollaborationRecorder(
            store, title_length=config.orchestration.session_title_length
        ),
    )


async def startup_event(config: AppConfig) -> None:
    """Initialize application components on startup."""
    global _store, _orchestrator

    logger.info(
        "Starting Agent Network",
        app_name=config.app.name,
        version=config.app.version,
        environment=config.app.env.value,
    )

    init_observability(
        public_key=config.langfuse.public_key,
        secret_key=config.langfuse.secret_key,
        host=config.langfuse.host,
        enabled=config.langfuse.enabled,
    )

    _store = build_store(config)
    _orchestrator = build_orchestrator(config, _store)

    init_dependencies(
        orchestrator=_orchestrator,
        registry=_orchestrator.registry,
        session_store=_store,
    )

    logger.info(
        "Agent Network started successfully",
        host=config.app.host,
        port=config.app.port,
        llm_provider=config.llm.provider,
    )


async def shutdown_event() -> None:
    """Cleanup on application shutdown."""
    global _store, _orchestrator

    logger.info("Shutting down Agent Network")

    if isinstance(_store, SupabaseStore):
        await _store.aclose()

    shutdown_observability()
    reset_dependencies()

    _store = None
    _orchestrator = None

    logger.info("Agent Network shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events.
    """
    config = app.state.config if hasattr(app.state, "config") else AppConfig()

    await startup_event(config)

    yield

    await shutdown_event()


def create_app(
    config_path: str | Path | None = None,
    env_file: str | Path | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_path: Optional path to YAML configuration file.
        env_file: Optional path to .env file.

    Returns:
        Configured FastAPI application instance.
    """
    if config_path is None:
        default_config_path = get_config_path()
        if default_config_path.exists():
            config_path = default_config_path

    config = init_config(yaml_path=config_path, env_file=env_file)

    setup_logging(
        level=config.logging.level,
        json_format=config.logging.format == LogFormat.JSON,
    )

    app = FastAPI(
        title=config.app.name,
        description="Multi-Agent Orchestration - role-based agents collaborating sequentially on a request",
        version=config.app.version,
        docs_url="/docs" if config.app.debug else None,
        redoc_url="/redoc" if config.app.debug else None,
        openapi_url="/openapi.json" if config.app.debug else None,
        lifespan=lifespan,
    )

    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if config.app.env == Environment.DEVELOPMENT else [],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next: Any) -> Any:
        """Add request ID to each request for tracing."""
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id
        set_correlation_id(request_id)

        response = await call_next(request)

        response.headers["X-Request-ID"] = request_id
        clear_correlation_id()

        return response

    @app.middleware("http")
    async def log_requests(request: Request, call_next: Any) -> Any:
        """Log incoming requests and responses."""
        logger.info(
            "Request received",
            method=request.method,
            path=str(request.url.path),
            client=request.client.host if request.client else "unknown",
        )

        response = await call_next(request)

        logger.info(
            "Response sent",
            method=request.method,
            path=str(request.url.path),
            status_code=response.status_code,
        )

        return response

    register_error_handlers(app)

    app.include_router(api_router)

    @app.get("/", tags=["Root"])
    async def root() -> dict[str, Any]:
        """Root endpoint with basic information."""
        return {
            "name": config.app.name,
            "version": config.app.version,
            "status": "running",
            "docs": "/docs" if config.app.debug else "disabled",
        }

    @app.get("/ready", tags=["Health"])
    async def readiness() -> JSONResponse:
        """Kubernetes readiness probe."""
        if not dependencies_ready():
            return JSONResponse(
                status_code=503,
                content={"status": "not_ready", "message": "Service not initialized"},
            )

        return JSONResponse(status_code=200, content={"status": "ready"})

    @app.get("/live", tags=["Health"])
    async def liveness() -> JSONResponse:
        """Kubernetes liveness probe."""
        return JSONResponse(status_code=200, content={"status": "alive"})

    return app


app = create_app()


def run_dev_server() -> None:
    """Run the development server with hot-reload."""
    import uvicorn

    config = get_config()

    uvicorn.run(
        "agent_network.main:app",
        host=config.app.host,
        port=config.app.port,
        reload=True,
        reload_dirs=["agent_network"],
        log_level="info",
    )


def run_prod_server() -> None:
    """Run the production server."""
    import uvicorn

    config = get_config()

    uvicorn.run(
        "agent_network.main:app",
        host=config.app.host,
        port=config.app.port,
        reload=False,
        workers=4,
        log_level="warning",
        access_log=False,
    )


if __name__ == "__main__":
    run_dev_server()
