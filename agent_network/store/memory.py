"""In-memory agent catalog and session store.

Used for development, tests, and deployments without a hosted database.
Mutations are serialised with an asyncio lock.
"""

import asyncio
from datetime import UTC, datetime
from typing import Any

from agent_network.models import (
    AgentDefinition,
    CollaborationRecord,
    Session,
    SessionStage,
)
from agent_network.utils.exceptions import PersistenceError


class InMemoryStore:
    """Catalog and session store backed by process memory."""

    def __init__(self, agents: list[AgentDefinition] | None = None) -> None:
        self._agents: list[AgentDefinition] = list(agents or [])
        self._sessions: dict[str, Session] = {}
        self._collaborations: dict[str, list[CollaborationRecord]] = {}
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def set_agents(self, agents: list[AgentDefinition]) -> None:
        """Replace the agent catalog."""
        self._agents = list(agents)

    async def fetch_active_agents(self) -> list[AgentDefinition]:
        active = [agent for agent in self._agents if agent.is_active]
        return sorted(active, key=lambda agent: agent.priority)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(
        self,
        title: str,
        description: str,
        stage: SessionStage = SessionStage.PROCESSING,
    ) -> Session:
        session = Session(title=title, description=description, current_stage=stage)
        async with self._lock:
            self._sessions[session.id] = session
            self._collaborations[session.id] = []
        return session.model_copy(deep=True)

    async def update_session(
        self,
        session_id: str,
        agents_involved: list[str],
        stage: SessionStage,
        workflow_state: dict[str, Any],
    ) -> Session:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                raise PersistenceError(
                    "update_session", f"Session not found: {session_id}"
                )

            session.agents_involved = session.merge_agents(agents_involved)
            if session.current_stage.can_advance_to(stage):
                session.current_stage = stage
            session.workflow_state = workflow_state
            session.updated_at = datetime.now(UTC)
            return session.model_copy(deep=True)

    async def insert_collaboration(self, record: CollaborationRecord) -> None:
        async with self._lock:
            if record.session_id not in self._sessions:
                raise PersistenceError(
                    "insert_collaboration", f"Session not found: {record.session_id}"
                )
            self._collaborations[record.session_id].append(record)

    async def get_session(self, session_id: str) -> Session | None:
        async with self._lock:
            session = self._sessions.get(session_id)
            return session.model_copy(deep=True) if session else None

    async def list_collaborations(self, session_id: str) -> list[CollaborationRecord]:
        async with self._lock:
            return list(self._collaborations.get(session_id, []))

    def __len__(self) -> int:
        """Return the number of stored sessions."""
        return len(self._sessions)
