"""Agent 관련 데이터 모델 정의.

이 모듈은 Agent 정의(역할, 시스템 프롬프트, 우선순위)와
Agent 호출 결과(AgentResponse)를 정의합니다.
"""

from enum import Enum

from pydantic import BaseModel, Field


class AgentRole(str, Enum):
    """Agent 역할 태그."""

    DESIGN = "design"  # UI/UX 설계
    CODE = "code"  # 코드 작성 (기본 Agent)
    TESTING = "testing"  # 테스트/보안 검토
    LEGAL = "legal"  # 라이선스/법률 검토
    GOVERNANCE = "governance"  # 커뮤니티 거버넌스


class AgentDefinition(BaseModel):
    """역할 기반 Agent 정의.

    카탈로그 저장소에서 로드되며 오케스트레이션 중에는 읽기 전용입니다.
    role은 알려진 AgentRole 값 외의 문자열도 허용합니다.
    """

    id: str = Field(..., description="Agent 고유 식별자")
    name: str = Field(..., description="Agent 짧은 이름")
    display_name: str = Field(default="", description="Agent 표시 이름")
    role: str = Field(..., description="역할 태그 (design, code, testing, ...)")
    system_prompt: str = Field(default="", description="시스템 프롬프트 템플릿")
    capabilities: list[str] = Field(
        default_factory=list, description="선언된 능력 목록 (정보용)"
    )
    priority: int = Field(default=100, description="우선순위 (낮을수록 먼저 실행)")
    is_active: bool = Field(default=True, description="활성 여부")
    model: str | None = Field(default=None, description="LLM 모델 (없으면 기본값)")
    max_tokens: int | None = Field(
        default=None, ge=1, description="최대 응답 토큰 수 (없으면 기본값)"
    )
    temperature: float | None = Field(
        default=None, ge=0.0, le=2.0, description="LLM 온도 (없으면 기본값)"
    )

    model_config = {"extra": "ignore", "frozen": True}

    @property
    def label(self) -> str:
        """프롬프트와 요약에 사용하는 표시 이름."""
        return self.display_name or self.name


class AgentResponse(BaseModel):
    """단일 Agent 호출 결과.

    실패한 호출도 예외 대신 failed=True인 응답으로 표현됩니다.
    """

    agent_id: str = Field(..., description="응답한 Agent ID")
    agent_name: str = Field(..., description="응답한 Agent 표시 이름")
    agent_role: str = Field(..., description="응답한 Agent 역할")
    response: str = Field(default="", description="응답 텍스트")
    processing_time_ms: int = Field(default=0, ge=0, description="처리 시간 (ms)")
    suggested_next_agents: list[str] | None = Field(
        default=None, description="추가로 호출을 제안하는 역할 목록"
    )
    failed: bool = Field(default=False, description="실패로부터 생성된 응답 여부")

    model_config = {"extra": "forbid"}

    def to_payload(self) -> dict:
        """와이어 형식(camelCase) 딕셔너리로 변환."""
        payload = {
            "agentId": self.agent_id,
            "agentName": self.agent_name,
            "agentRole": self.agent_role,
            "response": self.response,
            "processingTimeMs": self.processing_time_ms,
        }
        if self.suggested_next_agents:
            payload["suggestedNextAgents"] = list(self.suggested_next_agents)
        return payload
