"""Orchestrator - Central coordinator for agent collaboration.

This module runs one orchestration request end to end: session resolution,
first-pass selection, strictly sequential invocation with each agent seeing
all prior responses, one bounded round for suggested roles, session
finalization and response assembly.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import Any
from uuid import uuid4

from agent_network.agents.invoker import AgentInvoker
from agent_network.models import (
    AgentDefinition,
    AgentResponse,
    OrchestrationRequest,
    OrchestrationResult,
    RequestKind,
)
from agent_network.utils.exceptions import MissingConfigurationError
from agent_network.utils.logging import LoggerAdapter, get_session_logger
from agent_network.utils.observability import LangfuseClient, get_observability_client

from .context import ResponseAccumulator
from .recorder import CollaborationRecorder
from .registry import AgentCatalog, AgentRegistry
from .router import RelevanceRouter

# First pass plus one round of suggested agents. Suggestions from the last
# round are not followed.
MAX_COLLABORATION_ROUNDS = 2

_CREDENTIAL_KEYS = {
    "gateway": "AI_GATEWAY_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


def build_summary(responses: Sequence[AgentResponse]) -> str:
    """Render the human-readable summary of a request's responses.

    A single response is returned verbatim; several are rendered as one
    section per agent under a collaborative heading.
    """
    if not responses:
        return ""
    if len(responses) == 1:
        return responses[0].response

    sections = "\n\n".join(
        f"### {response.agent_name}\n{response.response}" for response in responses
    )
    return f"## Collaborative response from {len(responses)} agents\n\n{sections}"


class Orchestrator:
    """Central coordinator for agent collaboration.

    Example:
        orchestrator = Orchestrator(registry, router, invoker, recorder)
        result = await orchestrator.run(OrchestrationRequest(message="..."))
    """

    def __init__(
        self,
        registry: AgentRegistry,
        router: RelevanceRouter,
        invoker: AgentInvoker,
        recorder: CollaborationRecorder,
        observability: LangfuseClient | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            registry: Source of the request-scoped agent catalog.
            router: First-pass agent selection.
            invoker: Performs agent invocations.
            recorder: Best-effort persistence of the collaboration trace.
            observability: Optional Langfuse client; the global one if omitted.
        """
        self.registry = registry
        self.router = router
        self.invoker = invoker
        self.recorder = recorder
        self._observability = observability

    def _tracer(self) -> LangfuseClient:
        return self._observability or get_observability_client()

    def _check_credentials(self) -> None:
        provider = self.invoker.provider
        if not provider.is_configured:
            key = _CREDENTIAL_KEYS.get(provider.provider_name, "llm.api_key")
            raise MissingConfigurationError(key, f"{key} is not configured")

    async def run(
        self,
        request: OrchestrationRequest,
        cancel_event: asyncio.Event | None = None,
    ) -> OrchestrationResult:
        """Run one orchestration request.

        Args:
            request: The orchestration request.
            cancel_event: Optional event; once set, remaining invocations are
                skipped and the partial result is returned.

        Returns:
            The aggregated result, in invocation order.

        Raises:
            MissingConfigurationError: If the completion credential is absent.
            AgentCatalogUnavailableError: If no active agents can be loaded.
        """
        self._check_credentials()
        catalog = await self.registry.list_active_agents()

        session_id = request.session_id
        if not session_id:
            opened = await self.recorder.open_session(request.message)
            session_id = opened.session_id

        logger = get_session_logger(session_id)
        trace_id = self._tracer().start_trace(
            trace_id=str(uuid4()),
            name="orchestrate",
            metadata={"message_length": len(request.message)},
            session_id=session_id,
            tags=list(request.requested_agents or []),
        )
        trace_output: dict[str, Any] | None = None

        try:
            selected = self.router.select_agents(
                request.message, request.context, catalog, request.requested_agents
            )
            logger.info(
                "Agents selected",
                agents=[agent.name for agent in selected],
                explicit=bool(request.requested_agents),
            )

            accumulator = ResponseAccumulator()
            cancelled = await self._run_rounds(
                request, catalog, selected, accumulator, session_id, trace_id,
                cancel_event, logger,
            )

            responses = list(accumulator.snapshot())
            await self.recorder.finalize_session(
                session_id, accumulator.agent_ids(), responses
            )

            result = OrchestrationResult(
                session_id=session_id,
                responses=responses,
                total_agents=len(responses),
                total_processing_time_ms=accumulator.total_processing_time_ms(),
                summary=build_summary(responses),
                cancelled=cancelled,
            )

            logger.info(
                "Orchestration completed",
                total_agents=result.total_agents,
                total_processing_time_ms=result.total_processing_time_ms,
                cancelled=cancelled,
            )
            trace_output = {"total_agents": result.total_agents, "cancelled": cancelled}
            return result
        finally:
            self._tracer().end_trace(
                trace_id, output=trace_output, session_id=session_id
            )

    async def _run_rounds(
        self,
        request: OrchestrationRequest,
        catalog: AgentCatalog,
        selected: list[AgentDefinition],
        accumulator: ResponseAccumulator,
        session_id: str | None,
        trace_id: str | None,
        cancel_event: asyncio.Event | None,
        logger: LoggerAdapter,
    ) -> bool:
        """Invoke the selected agents, then the agents they suggested.

        Returns:
            True if the run was cancelled before all invocations finished.
        """
        round_agents = selected
        represented = {agent.role for agent in selected}

        for round_number in range(1, MAX_COLLABORATION_ROUNDS + 1):
            kind = RequestKind.GENERATE if round_number == 1 else RequestKind.REVIEW
            follow_suggestions = round_number < MAX_COLLABORATION_ROUNDS
            pending: list[str] = []

            for agent in round_agents:
                if cancel_event is not None and cancel_event.is_set():
                    logger.info(
                        "Orchestration cancelled",
                        completed=len(accumulator),
                        round=round_number,
                    )
                    return True

                response = await self._invoke_and_record(
                    agent, kind, request, accumulator, session_id, trace_id
                )

                if not follow_suggestions:
                    continue
                for role in response.suggested_next_agents or []:
                    if role not in represented and role not in pending:
                        pending.append(role)

            if not pending:
                break

            round_agents = catalog.with_roles(pending)
            represented.update(pending)
            if round_agents:
                logger.info(
                    "Additional agents invoked",
                    roles=pending,
                    agents=[agent.name for agent in round_agents],
                )

        return False

    async def _invoke_and_record(
        self,
        agent: AgentDefinition,
        kind: RequestKind,
        request: OrchestrationRequest,
        accumulator: ResponseAccumulator,
        session_id: str | None,
        trace_id: str | None,
    ) -> AgentResponse:
        prior = accumulator.snapshot()
        response = await self.invoker.invoke(
            agent, request.message, request.context, prior, trace_id=trace_id
        )
        accumulator.append(response)

        await self.recorder.record(
            session_id,
            agent,
            kind,
            {
                "message": request.message,
                "context": request.context_payload(),
                "priorResponses": [r.to_payload() for r in prior],
            },
            response,
        )
        return response
