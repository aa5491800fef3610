"""세션(Session)과 협업 기록 관련 데이터 모델 정의.

이 모듈은 다중 Agent 대화의 영속 단위인 Session과
Agent 호출 단위의 감사 기록(CollaborationRecord)을 정의합니다.
"""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class SessionStage(str, Enum):
    """세션 단계. 한 요청 안에서는 앞으로만 진행합니다."""

    CREATED = "created"  # 생성됨
    PROCESSING = "processing"  # 처리 중
    COMPLETED = "completed"  # 완료
    FAILED = "failed"  # 실패 (종료 상태)

    @property
    def order(self) -> int:
        """단계 순서 (FAILED는 COMPLETED와 같은 종료 단계)."""
        return _STAGE_ORDER[self]

    def can_advance_to(self, target: "SessionStage") -> bool:
        """target 단계로의 전이가 역행이 아닌지 확인."""
        return target.order >= self.order


_STAGE_ORDER = {
    SessionStage.CREATED: 0,
    SessionStage.PROCESSING: 1,
    SessionStage.COMPLETED: 2,
    SessionStage.FAILED: 2,
}


class RequestKind(str, Enum):
    """협업 기록의 요청 유형."""

    GENERATE = "generate"  # 1차 호출
    REVIEW = "review"  # 2차(제안) 호출


class CollaborationStatus(str, Enum):
    """협업 기록 상태."""

    COMPLETED = "completed"
    FAILED = "failed"


class Session(BaseModel):
    """다중 Agent 협업 세션.

    요청 간에 공유되는 영속 단위입니다. agents_involved는 줄어들지 않습니다.
    """

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="세션 고유 식별자"
    )
    title: str = Field(default="", description="세션 제목 (첫 메시지 앞부분)")
    description: str = Field(default="", description="세션 설명 (전체 메시지)")
    current_stage: SessionStage = Field(
        default=SessionStage.CREATED, description="현재 단계"
    )
    agents_involved: list[str] = Field(
        default_factory=list, description="참여한 Agent ID 목록 (중복 없음)"
    )
    workflow_state: dict[str, Any] = Field(
        default_factory=dict, description="최근 집계 응답 스냅샷"
    )
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="생성 시간"
    )
    updated_at: datetime | None = Field(default=None, description="마지막 갱신 시간")

    model_config = {"extra": "ignore"}

    def merge_agents(self, agent_ids: list[str]) -> list[str]:
        """기존 참여자 목록에 agent_ids를 순서를 유지하며 합칩니다."""
        merged = list(self.agents_involved)
        for agent_id in agent_ids:
            if agent_id not in merged:
                merged.append(agent_id)
        return merged


class CollaborationRecord(BaseModel):
    """Agent 호출 한 번에 대한 불변 감사 기록."""

    id: str = Field(
        default_factory=lambda: str(uuid.uuid4()), description="기록 고유 식별자"
    )
    session_id: str = Field(..., description="세션 ID")
    responding_agent_id: str = Field(..., description="응답한 Agent ID")
    request_type: RequestKind = Field(..., description="요청 유형")
    request_payload: dict[str, Any] = Field(
        default_factory=dict, description="요청 내용 (메시지 + 컨텍스트 스냅샷)"
    )
    response_payload: dict[str, Any] = Field(
        default_factory=dict, description="Agent 응답 전체"
    )
    status: CollaborationStatus = Field(..., description="처리 상태")
    processing_time_ms: int = Field(default=0, ge=0, description="처리 시간 (ms)")
    completed_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), description="완료 시간"
    )

    model_config = {"extra": "ignore", "frozen": True}
