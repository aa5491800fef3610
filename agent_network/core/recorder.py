"""Collaboration Recorder - best-effort persistence of the collaboration trace.

Every operation logs and swallows store failures and reports the outcome as
a PersistenceResult. A failed write never aborts orchestration.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from agent_network.models import (
    AgentDefinition,
    AgentResponse,
    CollaborationRecord,
    CollaborationStatus,
    RequestKind,
    SessionStage,
)
from agent_network.store.base import SessionStore
from agent_network.utils.logging import get_logger

logger = get_logger(__name__)


class PersistenceStatus(str, Enum):
    """Outcome of a best-effort write."""

    OK = "ok"
    SKIPPED = "skipped"  # no session to write against
    FAILED = "failed"


@dataclass(frozen=True)
class PersistenceResult:
    """Outcome of a recorder operation."""

    status: PersistenceStatus
    session_id: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == PersistenceStatus.OK

    @classmethod
    def skipped(cls) -> PersistenceResult:
        return cls(status=PersistenceStatus.SKIPPED)

    @classmethod
    def failed(cls, error: Exception, session_id: str | None = None) -> PersistenceResult:
        return cls(
            status=PersistenceStatus.FAILED,
            session_id=session_id,
            error=type(error).__name__,
        )


class CollaborationRecorder:
    """Writes sessions and collaboration records to a SessionStore."""

    def __init__(self, store: SessionStore, title_length: int = 100) -> None:
        self._store = store
        self._title_length = title_length

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def title_length(self) -> int:
        return self._title_length

    async def open_session(self, message: str) -> PersistenceResult:
        """Create a session for a request that did not supply one.

        The title is a bounded prefix of the message, the description the
        full message, and the stage starts at processing.
        """
        try:
            session = await self._store.create_session(
                title=message[: self._title_length],
                description=message,
                stage=SessionStage.PROCESSING,
            )
        except Exception as e:
            logger.warning("Session creation failed", error=type(e).__name__)
            return PersistenceResult.failed(e)

        logger.info("Session created", session_id=session.id)
        return PersistenceResult(status=PersistenceStatus.OK, session_id=session.id)

    async def record(
        self,
        session_id: str | None,
        agent: AgentDefinition,
        request_kind: RequestKind,
        request_payload: dict[str, Any],
        response: AgentResponse,
        status: CollaborationStatus | None = None,
    ) -> PersistenceResult:
        """Append one collaboration record for an invocation.

        Args:
            session_id: Session to record against; no-op when None.
            agent: The invoked agent.
            request_kind: generate (first pass) or review (second pass).
            request_payload: Message, context and prior responses the agent saw.
            response: The agent's response.
            status: Record status; derived from the response when omitted.
        """
        if session_id is None:
            return PersistenceResult.skipped()

        if status is None:
            status = (
                CollaborationStatus.FAILED
                if response.failed
                else CollaborationStatus.COMPLETED
            )

        record = CollaborationRecord(
            session_id=session_id,
            responding_agent_id=agent.id,
            request_type=request_kind,
            request_payload=request_payload,
            response_payload=response.to_payload(),
            status=status,
            processing_time_ms=response.processing_time_ms,
        )

        try:
            await self._store.insert_collaboration(record)
        except Exception as e:
            logger.warning(
                "Collaboration record write failed",
                session_id=session_id,
                agent_id=agent.id,
                request_type=request_kind.value,
                error=type(e).__name__,
            )
            return PersistenceResult.failed(e, session_id)

        return PersistenceResult(status=PersistenceStatus.OK, session_id=session_id)

    async def finalize_session(
        self,
        session_id: str | None,
        agent_ids: Sequence[str],
        responses: Sequence[AgentResponse],
    ) -> PersistenceResult:
        """Union the participants, mark the session completed and store the snapshot."""
        if session_id is None:
            return PersistenceResult.skipped()

        try:
            await self._store.update_session(
                session_id,
                agents_involved=list(agent_ids),
                stage=SessionStage.COMPLETED,
                workflow_state={
                    "responses": [response.to_payload() for response in responses]
                },
            )
        except Exception as e:
            logger.warning(
                "Session finalization failed",
                session_id=session_id,
                error=type(e).__name__,
            )
            return PersistenceResult.failed(e, session_id)

        return PersistenceResult(status=PersistenceStatus.OK, session_id=session_id)
