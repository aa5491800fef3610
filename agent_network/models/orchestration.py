"""오케스트레이션 요청/결과 데이터 모델 정의.

이 모듈은 전송 계층과 무관한 논리적 요청/응답 형식을 정의합니다.
"""

from typing import Any

from pydantic import BaseModel, Field

from .agent import AgentResponse


class CodeContext(BaseModel):
    """요청에 첨부된 생성 코드 조각."""

    frontend: str | None = Field(default=None, description="프론트엔드 코드")
    backend: str | None = Field(default=None, description="백엔드 코드")
    database: str | None = Field(default=None, description="데이터베이스 스키마/SQL")

    model_config = {"extra": "ignore"}

    def has_source_artifacts(self) -> bool:
        """프론트엔드 또는 백엔드 코드가 있는지 확인."""
        return bool(self.frontend or self.backend)

    def fragments(self) -> list[tuple[str, str]]:
        """존재하는 코드 조각을 (종류, 코드) 목록으로 반환."""
        return [
            (kind, code)
            for kind, code in (
                ("frontend", self.frontend),
                ("backend", self.backend),
                ("database", self.database),
            )
            if code
        ]


class RequestContext(BaseModel):
    """요청의 선택적 구조화 컨텍스트."""

    code: CodeContext | None = Field(default=None, description="코드 컨텍스트")
    proposal_id: str | None = Field(default=None, description="관련 제안 ID")
    stage: str | None = Field(default=None, description="현재 워크플로 단계")

    model_config = {"extra": "ignore"}

    def has_source_artifacts(self) -> bool:
        """생성된 소스 코드가 포함되어 있는지 확인."""
        return self.code is not None and self.code.has_source_artifacts()


class OrchestrationRequest(BaseModel):
    """오케스트레이션 요청."""

    message: str = Field(..., min_length=1, description="사용자 메시지")
    session_id: str | None = Field(default=None, description="기존 세션 ID")
    context: RequestContext | None = Field(default=None, description="구조화 컨텍스트")
    requested_agents: list[str] | None = Field(
        default=None, description="명시적으로 호출할 역할 목록"
    )

    model_config = {"extra": "forbid"}

    def context_payload(self) -> dict[str, Any] | None:
        """기록용 컨텍스트 딕셔너리 (와이어 형식)."""
        if self.context is None:
            return None
        payload: dict[str, Any] = {}
        if self.context.code is not None:
            payload["code"] = self.context.code.model_dump(exclude_none=True)
        if self.context.proposal_id is not None:
            payload["proposalId"] = self.context.proposal_id
        if self.context.stage is not None:
            payload["stage"] = self.context.stage
        return payload


class OrchestrationResult(BaseModel):
    """오케스트레이션 결과."""

    session_id: str | None = Field(default=None, description="세션 ID (없을 수 있음)")
    responses: list[AgentResponse] = Field(
        default_factory=list, description="호출 순서대로의 Agent 응답 목록"
    )
    total_agents: int = Field(default=0, description="응답한 Agent 수")
    total_processing_time_ms: int = Field(
        default=0, description="응답별 처리 시간의 합 (ms)"
    )
    summary: str = Field(default="", description="사람이 읽을 수 있는 요약")
    cancelled: bool = Field(default=False, description="중간 취소 여부")

    model_config = {"extra": "forbid"}
