"""API 통합 테스트.

FastAPI 엔드포인트의 통합 테스트를 수행합니다.
"""

from collections.abc import Iterator

import pytest
from conftest import FakeProvider, make_agent
from fastapi import FastAPI
from fastapi.testclient import TestClient

from agent_network.agents.invoker import AgentInvoker
from agent_network.api import (
    api_router,
    init_dependencies,
    reset_dependencies,
)
from agent_network.core.orchestrator import Orchestrator
from agent_network.core.recorder import CollaborationRecorder
from agent_network.core.registry import AgentRegistry
from agent_network.core.router import RelevanceRouter
from agent_network.store.memory import InMemoryStore
from agent_network.utils.error_handlers import register_error_handlers
from agent_network.utils.exceptions import LLMAPIError
from agent_network.utils.observability import LangfuseClient


@pytest.fixture
def app() -> FastAPI:
    """FastAPI 앱 fixture."""
    app = FastAPI(title="Agent Network Test")
    register_error_handlers(app)
    app.include_router(api_router)
    return app


@pytest.fixture
def store(sample_agents) -> InMemoryStore:
    """카탈로그와 세션을 함께 보관하는 저장소."""
    return InMemoryStore(sample_agents)


@pytest.fixture
def provider() -> FakeProvider:
    """테스트용 LLM Provider."""
    return FakeProvider(
        replies={
            "[testing]": "Revisa compliance antes de publicar.",
            "[governance]": LLMAPIError("Gateway returned status 500", status_code=500),
        }
    )


def wire(store: InMemoryStore, provider: FakeProvider) -> None:
    tracer = LangfuseClient(enabled=False)
    registry = AgentRegistry(store)
    orchestrator = Orchestrator(
        registry=registry,
        router=RelevanceRouter(),
        invoker=AgentInvoker(provider, timeout=5, observability=tracer),
        recorder=CollaborationRecorder(store),
        observability=tracer,
    )
    init_dependencies(orchestrator=orchestrator, registry=registry, session_store=store)


@pytest.fixture
def client(
    app: FastAPI, store: InMemoryStore, provider: FakeProvider
) -> Iterator[TestClient]:
    """TestClient fixture."""
    wire(store, provider)
    with TestClient(app) as test_client:
        yield test_client
    reset_dependencies()


class TestOrchestrateEndpoint:
    """오케스트레이션 API 테스트."""

    def test_single_agent(self, client: TestClient):
        """기본 code Agent 하나가 응답."""
        response = client.post("/api/v1/orchestrate", json={"message": "hola"})

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["totalAgents"] == 1
        assert data["sessionId"]
        assert data["summary"] == "Done."
        assert data["responses"][0] == {
            "agentId": "agent-code",
            "agentName": "Code Agent",
            "agentRole": "code",
            "response": "Done.",
            "processingTimeMs": data["responses"][0]["processingTimeMs"],
        }
        assert "error" not in data

    def test_code_context_and_suggestions(self, client: TestClient):
        """코드 컨텍스트는 code, testing을 강제하고 제안으로 legal 추가."""
        response = client.post(
            "/api/v1/orchestrate",
            json={
                "message": "revisa la seguridad de este código",
                "context": {"code": {"backend": "Deno.serve(() => new Response())"}},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert [r["agentRole"] for r in data["responses"]] == [
            "code",
            "testing",
            "legal",
        ]
        assert data["responses"][1]["suggestedNextAgents"] == ["legal"]
        assert data["summary"].startswith("## Collaborative response from 3 agents")
        assert data["totalProcessingTimeMs"] == sum(
            r["processingTimeMs"] for r in data["responses"]
        )

    def test_requested_agents(self, client: TestClient):
        """명시적 역할 요청."""
        response = client.post(
            "/api/v1/orchestrate",
            json={"message": "diseño", "requestedAgents": ["legal"]},
        )

        data = response.json()
        assert [r["agentRole"] for r in data["responses"]] == ["legal"]

    def test_degraded_response(self, client: TestClient):
        """업스트림 실패는 요청을 실패시키지 않음."""
        response = client.post(
            "/api/v1/orchestrate",
            json={"message": "hola", "requestedAgents": ["governance"]},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["totalAgents"] == 1
        assert data["responses"][0]["response"].startswith("Error:")

    def test_session_reuse(self, client: TestClient):
        """같은 세션으로 두 번 요청하면 참여 Agent가 합쳐짐."""
        first = client.post("/api/v1/orchestrate", json={"message": "diseño"}).json()
        client.post(
            "/api/v1/orchestrate",
            json={"message": "licencia", "sessionId": first["sessionId"]},
        )

        response = client.get(f"/api/v1/sessions/{first['sessionId']}")

        assert response.status_code == 200
        session = response.json()["data"]
        assert session["agentsInvolved"] == ["agent-design", "agent-legal"]
        assert session["currentStage"] == "completed"
        assert session["title"] == "diseño"

    def test_empty_session_id_creates_session(
        self, client: TestClient, store: InMemoryStore
    ):
        """빈 sessionId는 새 세션으로 처리."""
        response = client.post(
            "/api/v1/orchestrate", json={"message": "hola", "sessionId": ""}
        )

        data = response.json()
        assert data["sessionId"]
        assert len(store) == 1

    def test_empty_message_rejected(self, client: TestClient):
        """빈 메시지는 422."""
        response = client.post("/api/v1/orchestrate", json={"message": ""})

        assert response.status_code == 422
        assert response.json()["success"] is False

    def test_blank_message_rejected(self, client: TestClient):
        """공백 메시지는 422."""
        response = client.post("/api/v1/orchestrate", json={"message": "   "})

        assert response.status_code == 422

    def test_missing_credential(self, app: FastAPI, store: InMemoryStore):
        """자격 증명이 없으면 500 {success: false, error}."""
        wire(store, FakeProvider(api_key=""))

        with TestClient(app) as client:
            response = client.post("/api/v1/orchestrate", json={"message": "hola"})
        reset_dependencies()

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "AI_GATEWAY_API_KEY is not configured",
        }
        assert len(store) == 0

    def test_empty_catalog(self, app: FastAPI):
        """활성 Agent가 없으면 500."""
        store = InMemoryStore([make_agent("code", 20, is_active=False)])
        wire(store, FakeProvider())

        with TestClient(app) as client:
            response = client.post("/api/v1/orchestrate", json={"message": "hola"})
        reset_dependencies()

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "No active agents found"}


class TestAgentEndpoints:
    """Agent 카탈로그 API 테스트."""

    def test_list_agents(self, client: TestClient):
        """우선순위 순서의 Agent 목록."""
        response = client.get("/api/v1/agents")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["metadata"]["count"] == 5
        assert [a["role"] for a in data["data"]] == [
            "design",
            "code",
            "testing",
            "legal",
            "governance",
        ]
        assert data["data"][0]["displayName"] == "Design Agent"

    def test_get_agent(self, client: TestClient):
        """Agent 단건 조회."""
        response = client.get("/api/v1/agents/agent-legal")

        assert response.status_code == 200
        assert response.json()["data"]["role"] == "legal"

    def test_get_agent_not_found(self, client: TestClient):
        """없는 Agent는 404."""
        response = client.get("/api/v1/agents/agent-unknown")

        assert response.status_code == 404
        assert response.json()["success"] is False


class TestSessionEndpoints:
    """세션 API 테스트."""

    def test_get_session_not_found(self, client: TestClient):
        """없는 세션은 404."""
        response = client.get("/api/v1/sessions/missing")

        assert response.status_code == 404
        assert response.json()["error"] == "Session not found: missing"

    def test_list_collaborations(self, client: TestClient):
        """협업 기록은 호출 순서대로, 요청 유형 포함."""
        orchestrated = client.post(
            "/api/v1/orchestrate",
            json={
                "message": "revisa la seguridad de este código",
                "context": {"code": {"frontend": "<App />"}},
            },
        ).json()

        response = client.get(
            f"/api/v1/sessions/{orchestrated['sessionId']}/collaborations"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["metadata"]["count"] == 3
        assert [r["requestType"] for r in data["data"]] == [
            "generate",
            "generate",
            "review",
        ]
        assert [r["respondingAgentId"] for r in data["data"]] == [
            "agent-code",
            "agent-testing",
            "agent-legal",
        ]
        assert data["data"][0]["requestPayload"]["context"] == {
            "code": {"frontend": "<App />"}
        }

    def test_list_collaborations_not_found(self, client: TestClient):
        """없는 세션의 기록 조회는 404."""
        response = client.get("/api/v1/sessions/missing/collaborations")

        assert response.status_code == 404


class TestHealthEndpoint:
    """시스템 상태 체크 테스트."""

    def test_health_check(self, client: TestClient):
        """기본 상태 체크 테스트."""
        response = client.get("/api/v1/health")

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert data["data"]["status"] == "healthy"
        assert data["data"]["provider"]["status"] == "configured"

    def test_unwired_dependencies(self, app: FastAPI):
        """의존성이 연결되지 않으면 503."""
        reset_dependencies()

        with TestClient(app) as client:
            response = client.get("/api/v1/health")

        assert response.status_code == 503
