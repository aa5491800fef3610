"""API 스키마 정의.

FastAPI 엔드포인트에서 사용하는 Request/Response 스키마를 정의합니다.
오케스트레이션 와이어 형식은 camelCase 키를 사용합니다.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from agent_network.models import (
    AgentDefinition,
    AgentResponse,
    CodeContext,
    CollaborationRecord,
    OrchestrationRequest,
    OrchestrationResult,
    RequestContext,
    Session,
)

# =============================================================================
# Common Schemas
# =============================================================================


class APIResponse(BaseModel):
    """표준 API 응답 형식."""

    success: bool = Field(..., description="요청 성공 여부")
    data: Any = Field(default=None, description="응답 데이터")
    error: str | None = Field(default=None, description="에러 메시지")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="추가 메타데이터"
    )


class CamelModel(BaseModel):
    """camelCase 와이어 형식 기본 모델 (snake_case 입력도 허용)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Orchestration Schemas
# =============================================================================


class CodeContextSchema(CamelModel):
    """요청에 첨부된 코드 조각."""

    frontend: str | None = Field(default=None, description="프론트엔드 코드 (tsx)")
    backend: str | None = Field(default=None, description="백엔드 코드 (typescript)")
    database: str | None = Field(default=None, description="데이터베이스 SQL")


class RequestContextSchema(CamelModel):
    """오케스트레이션 요청 컨텍스트."""

    code: CodeContextSchema | None = Field(default=None, description="코드 컨텍스트")
    proposal_id: str | None = Field(default=None, description="관련 제안 ID")
    stage: str | None = Field(default=None, description="현재 워크플로 단계")

    def to_domain(self) -> RequestContext:
        return RequestContext(
            code=CodeContext(**self.code.model_dump()) if self.code else None,
            proposal_id=self.proposal_id,
            stage=self.stage,
        )


class OrchestrateRequest(CamelModel):
    """오케스트레이션 요청."""

    session_id: str | None = Field(default=None, description="기존 세션 ID")
    message: str = Field(..., min_length=1, description="사용자 메시지")
    context: RequestContextSchema | None = Field(default=None, description="컨텍스트")
    requested_agents: list[str] | None = Field(
        default=None, description="명시적으로 호출할 역할 목록"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "message": "Create a responsive login component in React",
                "context": {"code": {"frontend": "export const Login = () => null;"}},
            }
        },
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v

    def to_domain(self) -> OrchestrationRequest:
        """도메인 요청 객체로 변환."""
        return OrchestrationRequest(
            message=self.message,
            session_id=self.session_id,
            context=self.context.to_domain() if self.context else None,
            requested_agents=self.requested_agents,
        )


class AgentResponseSchema(CamelModel):
    """Agent 응답."""

    agent_id: str = Field(..., description="응답한 Agent ID")
    agent_name: str = Field(..., description="Agent 표시 이름")
    agent_role: str = Field(..., description="Agent 역할")
    response: str = Field(..., description="응답 텍스트")
    processing_time_ms: int = Field(..., description="처리 시간 (ms)")
    suggested_next_agents: list[str] | None = Field(
        default=None, description="추가 호출 제안 역할"
    )

    @classmethod
    def from_domain(cls, response: AgentResponse) -> "AgentResponseSchema":
        return cls(
            agent_id=response.agent_id,
            agent_name=response.agent_name,
            agent_role=response.agent_role,
            response=response.response,
            processing_time_ms=response.processing_time_ms,
            suggested_next_agents=response.suggested_next_agents or None,
        )


class OrchestrateResponse(CamelModel):
    """오케스트레이션 응답."""

    success: bool = Field(..., description="요청 성공 여부")
    session_id: str | None = Field(default=None, description="세션 ID")
    responses: list[AgentResponseSchema] = Field(
        default_factory=list, description="호출 순서대로의 Agent 응답"
    )
    total_agents: int = Field(default=0, description="응답한 Agent 수")
    total_processing_time_ms: int = Field(default=0, description="총 처리 시간 (ms)")
    summary: str = Field(default="", description="요약")
    error: str | None = Field(default=None, description="에러 메시지")

    @classmethod
    def from_result(cls, result: OrchestrationResult) -> "OrchestrateResponse":
        return cls(
            success=True,
            session_id=result.session_id,
            responses=[AgentResponseSchema.from_domain(r) for r in result.responses],
            total_agents=result.total_agents,
            total_processing_time_ms=result.total_processing_time_ms,
            summary=result.summary,
        )

    @classmethod
    def failure(cls, error: str) -> "OrchestrateResponse":
        return cls(success=False, error=error)


# =============================================================================
# Agent Schemas
# =============================================================================


class AgentSchema(CamelModel):
    """Agent 카탈로그 항목."""

    id: str = Field(..., description="Agent ID")
    name: str = Field(..., description="Agent 이름")
    display_name: str = Field(default="", description="표시 이름")
    role: str = Field(..., description="역할")
    capabilities: list[str] = Field(default_factory=list, description="능력 목록")
    priority: int = Field(..., description="우선순위")

    @classmethod
    def from_domain(cls, agent: AgentDefinition) -> "AgentSchema":
        return cls(
            id=agent.id,
            name=agent.name,
            display_name=agent.label,
            role=agent.role,
            capabilities=list(agent.capabilities),
            priority=agent.priority,
        )


# =============================================================================
# Session Schemas
# =============================================================================


class SessionSchema(CamelModel):
    """협업 세션."""

    id: str = Field(..., description="세션 ID")
    title: str = Field(default="", description="제목")
    description: str = Field(default="", description="설명")
    current_stage: str = Field(..., description="현재 단계")
    agents_involved: list[str] = Field(default_factory=list, description="참여 Agent")
    workflow_state: dict[str, Any] = Field(default_factory=dict, description="상태 스냅샷")
    created_at: datetime = Field(..., description="생성 시간")
    updated_at: datetime | None = Field(default=None, description="갱신 시간")

    @classmethod
    def from_domain(cls, session: Session) -> "SessionSchema":
        return cls(
            id=session.id,
            title=session.title,
            description=session.description,
            current_stage=session.current_stage.value,
            agents_involved=list(session.agents_involved),
            workflow_state=session.workflow_state,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class CollaborationSchema(CamelModel):
    """협업 기록."""

    id: str = Field(..., description="기록 ID")
    session_id: str = Field(..., description="세션 ID")
    responding_agent_id: str = Field(..., description="응답 Agent ID")
    request_type: str = Field(..., description="요청 유형 (generate, review)")
    request_payload: dict[str, Any] = Field(default_factory=dict, description="요청")
    response_payload: dict[str, Any] = Field(default_factory=dict, description="응답")
    status: str = Field(..., description="상태")
    processing_time_ms: int = Field(default=0, description="처리 시간 (ms)")
    completed_at: datetime = Field(..., description="완료 시간")

    @classmethod
    def from_domain(cls, record: CollaborationRecord) -> "CollaborationSchema":
        return cls(
            id=record.id,
            session_id=record.session_id,
            responding_agent_id=record.responding_agent_id,
            request_type=record.request_type.value,
            request_payload=record.request_payload,
            response_payload=record.response_payload,
            status=record.status.value,
            processing_time_ms=record.processing_time_ms,
            completed_at=record.completed_at,
        )
