"""Agent Invoker - one upstream completion per agent invocation.

This module assembles the effective prompt for an agent (its system prompt
plus every prior response of the same request, and the user message plus
any attached code), performs a single bounded completion call, and turns
the outcome into an AgentResponse. Invocation never raises: upstream
failures become degraded responses.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from typing import Any

from agent_network.agents.suggestions import (
    KeywordSuggestionExtractor,
    SuggestionExtractor,
)
from agent_network.llm import BaseLLMProvider
from agent_network.models import AgentDefinition, AgentResponse, RequestContext
from agent_network.utils.config import AgentDefaults
from agent_network.utils.exceptions import LLMAPIError, LLMTimeoutError
from agent_network.utils.logging import get_agent_logger
from agent_network.utils.observability import LangfuseClient, get_observability_client

DEGRADED_RESPONSE_PREFIX = "Error: the agent could not process the request."

# Fence language per code fragment kind
_FENCE_LANGUAGES = {
    "frontend": "tsx",
    "backend": "typescript",
    "database": "sql",
}


def build_system_prompt(
    agent: AgentDefinition,
    prior_responses: Sequence[AgentResponse],
) -> str:
    """Append the responses of earlier agents to the agent's system prompt.

    Args:
        agent: The agent about to be invoked.
        prior_responses: Responses already produced in this request, in order.

    Returns:
        The effective system prompt.
    """
    prompt = agent.system_prompt
    if not prior_responses:
        return prompt

    prompt += "\n\n## Context from other agents:\n"
    for prior in prior_responses:
        prompt += f"\n### {prior.agent_name} ({prior.agent_role}):\n{prior.response}\n"
    return prompt


def build_user_message(message: str, context: RequestContext | None) -> str:
    """Append any attached code fragments to the user message.

    Args:
        message: The raw user message.
        context: Optional request context carrying code fragments.

    Returns:
        The effective user message.
    """
    if context is None or context.code is None:
        return message

    fragments = context.code.fragments()
    if not fragments:
        return message

    user_message = message + "\n\n## Current code:\n"
    for kind, code in fragments:
        language = _FENCE_LANGUAGES[kind]
        user_message += f"### {kind.capitalize()}:\n```{language}\n{code}\n```\n"
    return user_message


def describe_failure(error: BaseException, timeout: float) -> str:
    """Produce a user-safe reason for a failed invocation.

    Only the status code, the timeout, or the exception class is exposed,
    never upstream bodies or credentials.
    """
    if isinstance(error, (LLMTimeoutError, asyncio.TimeoutError)):
        return f"The request timed out after {timeout:g}s."
    if isinstance(error, LLMAPIError) and error.status_code is not None:
        return f"Upstream service returned status {error.status_code}."
    if isinstance(error, LLMAPIError):
        return "Upstream service request failed."
    return f"Unexpected {type(error).__name__}."


class AgentInvoker:
    """Invokes agents against the completion service.

    Example:
        invoker = AgentInvoker(provider, defaults=config.agent_defaults)
        response = await invoker.invoke(agent, "Create a login form", None, [])
    """

    def __init__(
        self,
        provider: BaseLLMProvider,
        defaults: AgentDefaults | None = None,
        timeout: float = 120,
        extractor: SuggestionExtractor | None = None,
        observability: LangfuseClient | None = None,
    ) -> None:
        """Initialize the invoker.

        Args:
            provider: Completion provider used for every invocation.
            defaults: Model settings for agents without overrides.
            timeout: Per-invocation timeout in seconds.
            extractor: Follow-up suggestion extractor.
            observability: Optional Langfuse client; the global one if omitted.
        """
        self._provider = provider
        self._defaults = defaults or AgentDefaults()
        self._timeout = timeout
        self._extractor = extractor or KeywordSuggestionExtractor()
        self._observability = observability

    @property
    def provider(self) -> BaseLLMProvider:
        return self._provider

    @property
    def timeout(self) -> float:
        return self._timeout

    def _tracer(self) -> LangfuseClient:
        return self._observability or get_observability_client()

    async def invoke(
        self,
        agent: AgentDefinition,
        message: str,
        context: RequestContext | None,
        prior_responses: Sequence[AgentResponse],
        trace_id: str | None = None,
    ) -> AgentResponse:
        """Invoke one agent and return its response.

        Args:
            agent: The agent to invoke.
            message: The user message.
            context: Optional structured request context.
            prior_responses: Snapshot of the responses produced so far.
            trace_id: Optional Langfuse trace to attach the generation to.

        Returns:
            The agent's response, degraded (failed=True) if the call failed.
        """
        logger = get_agent_logger(agent.id, agent.role)

        system_prompt = build_system_prompt(agent, prior_responses)
        user_message = build_user_message(message, context)
        model = agent.model or self._defaults.model
        messages = [{"role": "user", "content": user_message}]

        logger.debug(
            "Invoking agent",
            agent_name=agent.name,
            model=model,
            prior_responses=len(prior_responses),
        )

        started = time.perf_counter()
        try:
            result = await asyncio.wait_for(
                self._provider.chat(
                    messages=messages,
                    model=model,
                    max_tokens=agent.max_tokens or self._defaults.max_tokens,
                    temperature=(
                        agent.temperature
                        if agent.temperature is not None
                        else self._defaults.temperature
                    ),
                    system_prompt=system_prompt,
                ),
                timeout=self._timeout,
            )
        except Exception as e:
            elapsed_ms = _elapsed_ms(started)
            reason = describe_failure(e, self._timeout)
            logger.warning(
                "Agent invocation failed",
                agent_name=agent.name,
                error=type(e).__name__,
                reason=reason,
                processing_time_ms=elapsed_ms,
            )
            text = f"{DEGRADED_RESPONSE_PREFIX} {reason}"
            self._trace(
                trace_id, agent, model, system_prompt, messages, text, None, "ERROR"
            )
            return AgentResponse(
                agent_id=agent.id,
                agent_name=agent.label,
                agent_role=agent.role,
                response=text,
                processing_time_ms=elapsed_ms,
                failed=True,
            )

        elapsed_ms = _elapsed_ms(started)
        content = result.content
        try:
            suggestions = _dedupe(self._extractor.extract(content))
        except Exception as e:
            # Suggestions are optional; the content still stands
            logger.warning(
                "Suggestion extraction failed",
                agent_name=agent.name,
                error=type(e).__name__,
            )
            suggestions = []

        logger.info(
            "Agent responded",
            agent_name=agent.name,
            processing_time_ms=elapsed_ms,
            suggested_next_agents=suggestions,
        )
        self._trace(
            trace_id, agent, result.model, system_prompt, messages, content, result.usage
        )

        return AgentResponse(
            agent_id=agent.id,
            agent_name=agent.label,
            agent_role=agent.role,
            response=content,
            processing_time_ms=elapsed_ms,
            suggested_next_agents=suggestions or None,
        )

    def _trace(
        self,
        trace_id: str | None,
        agent: AgentDefinition,
        model: str,
        system_prompt: str,
        messages: list[dict[str, str]],
        output: str,
        usage: dict[str, int] | None,
        level: str = "DEFAULT",
    ) -> None:
        metadata: dict[str, Any] = {"agent_id": agent.id, "agent_role": agent.role}
        self._tracer().log_generation(
            trace_id=trace_id,
            name=agent.name,
            model=model,
            input_messages=[{"role": "system", "content": system_prompt}, *messages],
            output=output,
            usage=usage or None,
            metadata=metadata,
            level=level,
        )


def _elapsed_ms(started: float) -> int:
    return max(0, int((time.perf_counter() - started) * 1000))


def _dedupe(roles: Sequence[str]) -> list[str]:
    seen: list[str] = []
    for role in roles:
        if role not in seen:
            seen.append(role)
    return seen
