"""테스트 공통 설정 및 fixtures."""

import asyncio
from collections.abc import AsyncGenerator
from typing import Any

import pytest
import pytest_asyncio

from agent_network.agents.invoker import AgentInvoker
from agent_network.core.orchestrator import Orchestrator
from agent_network.core.recorder import CollaborationRecorder
from agent_network.core.registry import AgentCatalog, AgentRegistry
from agent_network.core.router import RelevanceRouter
from agent_network.llm.base import BaseLLMProvider, LLMResponse
from agent_network.models import AgentDefinition
from agent_network.store.memory import InMemoryStore
from agent_network.utils.observability import LangfuseClient


class FakeProvider(BaseLLMProvider):
    """테스트용 LLM Provider.

    replies의 키가 system prompt의 접두사와 일치하면 해당 응답(또는 예외)을
    반환하고, 일치하지 않으면 default 응답을 반환합니다.
    """

    def __init__(
        self,
        replies: dict[str, Any] | None = None,
        api_key: str = "test-key",
        default: str = "Done.",
        delay: float = 0.0,
    ) -> None:
        super().__init__(api_key=api_key)
        self.replies = replies or {}
        self.default = default
        self.delay = delay
        self.calls: list[dict[str, Any]] = []

    @property
    def provider_name(self) -> str:
        return "gateway"

    @property
    def default_model(self) -> str:
        return "fake-model"

    async def chat(
        self,
        messages: list[dict[str, str]],
        model: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.7,
        system_prompt: str | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        self.calls.append(
            {
                "messages": messages,
                "model": model,
                "max_tokens": max_tokens,
                "temperature": temperature,
                "system_prompt": system_prompt or "",
            }
        )
        if self.delay:
            await asyncio.sleep(self.delay)

        reply: Any = self.default
        for prefix, value in self.replies.items():
            if (system_prompt or "").startswith(prefix):
                reply = value
                break

        if isinstance(reply, BaseException):
            raise reply
        return LLMResponse(content=reply, model=model or self.default_model)


def make_agent(
    role: str,
    priority: int,
    agent_id: str | None = None,
    **overrides: Any,
) -> AgentDefinition:
    """역할 기반 테스트 Agent 생성. system prompt는 '[role]'로 시작합니다."""
    data: dict[str, Any] = {
        "id": agent_id or f"agent-{role}",
        "name": role,
        "display_name": f"{role.capitalize()} Agent",
        "role": role,
        "system_prompt": f"[{role}] You are the {role} agent.",
        "priority": priority,
    }
    data.update(overrides)
    return AgentDefinition(**data)


@pytest.fixture
def sample_agents() -> list[AgentDefinition]:
    """5개 역할의 기본 Agent 목록 (우선순위 오름차순)."""
    return [
        make_agent("design", 10),
        make_agent("code", 20),
        make_agent("testing", 30),
        make_agent("legal", 40),
        make_agent("governance", 50),
    ]


@pytest.fixture
def catalog(sample_agents: list[AgentDefinition]) -> AgentCatalog:
    """Agent 카탈로그 스냅샷 fixture."""
    return AgentCatalog(sample_agents)


@pytest.fixture
def fake_provider() -> FakeProvider:
    """FakeProvider fixture."""
    return FakeProvider()


@pytest.fixture
def disabled_tracer() -> LangfuseClient:
    """비활성화된 Langfuse 클라이언트."""
    return LangfuseClient(enabled=False)


@pytest_asyncio.fixture
async def memory_store(
    sample_agents: list[AgentDefinition],
) -> AsyncGenerator[InMemoryStore, None]:
    """InMemoryStore fixture."""
    store = InMemoryStore(sample_agents)
    yield store


@pytest.fixture
def invoker(fake_provider: FakeProvider, disabled_tracer: LangfuseClient) -> AgentInvoker:
    """AgentInvoker fixture."""
    return AgentInvoker(fake_provider, timeout=5, observability=disabled_tracer)


@pytest_asyncio.fixture
async def orchestrator(
    memory_store: InMemoryStore,
    invoker: AgentInvoker,
    disabled_tracer: LangfuseClient,
) -> AsyncGenerator[Orchestrator, None]:
    """Orchestrator fixture."""
    orch = Orchestrator(
        registry=AgentRegistry(memory_store),
        router=RelevanceRouter(),
        invoker=invoker,
        recorder=CollaborationRecorder(memory_store),
        observability=disabled_tracer,
    )
    yield orch
