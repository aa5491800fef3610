"""Persistence boundary protocols.

The orchestrator only talks to the agent catalog and the session store
through these protocols. Implementations raise PersistenceError on failure.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from agent_network.models import (
    AgentDefinition,
    CollaborationRecord,
    Session,
    SessionStage,
)


@runtime_checkable
class AgentCatalogStore(Protocol):
    """Read-only source of agent definitions."""

    async def fetch_active_agents(self) -> list[AgentDefinition]:
        """Return active agents ordered by ascending priority."""
        ...


@runtime_checkable
class SessionStore(Protocol):
    """Insert/update sink for sessions and collaboration records."""

    async def create_session(
        self,
        title: str,
        description: str,
        stage: SessionStage = SessionStage.PROCESSING,
    ) -> Session:
        """Insert a new session and return it with its identity."""
        ...

    async def update_session(
        self,
        session_id: str,
        agents_involved: list[str],
        stage: SessionStage,
        workflow_state: dict[str, Any],
    ) -> Session:
        """Union participants, advance the stage and replace the workflow snapshot."""
        ...

    async def insert_collaboration(self, record: CollaborationRecord) -> None:
        """Append a write-once collaboration record."""
        ...

    async def get_session(self, session_id: str) -> Session | None:
        """Fetch a session, or None if it does not exist."""
        ...

    async def list_collaborations(self, session_id: str) -> list[CollaborationRecord]:
        """Return a session's collaboration records in creation order."""
        ...
