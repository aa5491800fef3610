"""Supabase (PostgREST) agent catalog and session store.

Talks to the hosted database's REST interface with the service-role key.
Any transport failure or non-success status is raised as PersistenceError.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

import httpx

from agent_network.models import (
    AgentDefinition,
    CollaborationRecord,
    Session,
    SessionStage,
)
from agent_network.utils.exceptions import PersistenceError
from agent_network.utils.logging import get_logger

logger = get_logger(__name__)

AGENTS_TABLE = "ia_agents"
SESSIONS_TABLE = "ia_collaborative_sessions"
COLLABORATIONS_TABLE = "ia_agent_collaborations"


class SupabaseStore:
    """Catalog and session store backed by Supabase PostgREST."""

    def __init__(
        self,
        url: str,
        service_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            url: Supabase project URL.
            service_key: Service-role key used for both apikey and bearer auth.
            timeout: Per-request timeout in seconds.
            transport: Optional httpx transport (mainly for testing).
        """
        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": service_key,
                "Authorization": f"Bearer {service_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._client.request(
                method, f"/{table}", params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise PersistenceError(
                operation,
                f"{operation} failed with status {e.response.status_code}",
                cause=e,
            ) from e
        except httpx.HTTPError as e:
            raise PersistenceError(
                operation, f"{operation} failed: {type(e).__name__}", cause=e
            ) from e

        if not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    async def fetch_active_agents(self) -> list[AgentDefinition]:
        rows = await self._request(
            "fetch_active_agents",
            "GET",
            AGENTS_TABLE,
            params={"select": "*", "is_active": "eq.true", "order": "priority.asc"},
        )
        return [_agent_from_row(row) for row in rows or []]

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def create_session(
        self,
        title: str,
        description: str,
        stage: SessionStage = SessionStage.PROCESSING,
    ) -> Session:
        rows = await self._request(
            "create_session",
            "POST",
            SESSIONS_TABLE,
            json={
                "title": title,
                "description": description,
                "current_stage": stage.value,
            },
            prefer="return=representation",
        )
        if not rows:
            raise PersistenceError("create_session", "Session insert returned no row")
        return _session_from_row(rows[0])

    async def get_session(self, session_id: str) -> Session | None:
        rows = await self._request(
            "get_session",
            "GET",
            SESSIONS_TABLE,
            params={"select": "*", "id": f"eq.{session_id}"},
        )
        if not rows:
            return None
        return _session_from_row(rows[0])

    async def update_session(
        self,
        session_id: str,
        agents_involved: list[str],
        stage: SessionStage,
        workflow_state: dict[str, Any],
    ) -> Session:
        # PostgREST cannot union arrays in a PATCH, so read then write.
        current = await self.get_session(session_id)
        if current is None:
            raise PersistenceError("update_session", f"Session not found: {session_id}")

        next_stage = (
            stage if current.current_stage.can_advance_to(stage) else current.current_stage
        )
        rows = await self._request(
            "update_session",
            "PATCH",
            SESSIONS_TABLE,
            params={"id": f"eq.{session_id}"},
            json={
                "agents_involved": current.merge_agents(agents_involved),
                "current_stage": next_stage.value,
                "workflow_state": workflow_state,
                "updated_at": datetime.now(UTC).isoformat(),
            },
            prefer="return=representation",
        )
        if not rows:
            raise PersistenceError("update_session", f"Session not found: {session_id}")
        return _session_from_row(rows[0])

    async def insert_collaboration(self, record: CollaborationRecord) -> None:
        await self._request(
            "insert_collaboration",
            "POST",
            COLLABORATIONS_TABLE,
            json=record.model_dump(mode="json"),
            prefer="return=minimal",
        )

    async def list_collaborations(self, session_id: str) -> list[CollaborationRecord]:
        rows = await self._request(
            "list_collaborations",
            "GET",
            COLLABORATIONS_TABLE,
            params={
                "select": "*",
                "session_id": f"eq.{session_id}",
                "order": "completed_at.asc",
            },
        )
        return [CollaborationRecord.model_validate(row) for row in rows or []]


def _agent_from_row(row: dict[str, Any]) -> AgentDefinition:
    data = dict(row)
    capabilities = data.get("capabilities")
    if not isinstance(capabilities, list):
        data["capabilities"] = []
    else:
        data["capabilities"] = [str(cap) for cap in capabilities]
    if data.get("display_name") is None:
        data["display_name"] = ""
    if data.get("system_prompt") is None:
        data["system_prompt"] = ""
    if data.get("priority") is None:
        data["priority"] = 100
    return AgentDefinition.model_validate(data)


def _session_from_row(row: dict[str, Any]) -> Session:
    data = {key: value for key, value in row.items() if value is not None}
    return Session.model_validate(data)
