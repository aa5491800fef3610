#!/usr/bin/env python
"""Collaborative Request Example - 기본 사용 예제.

이 예제는 YAML로 정의된 Agent 카탈로그와 인메모리 저장소를 사용하여
하나의 요청을 오케스트레이션하는 방법을 보여줍니다.
AI_GATEWAY_API_KEY (또는 LLM_PROVIDER=anthropic, ANTHROPIC_API_KEY)가 필요합니다.

사용법:
    python examples/collaborative_request.py
"""

import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 Python 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from agent_network.main import build_orchestrator, build_store, get_config_path
from agent_network.models import CodeContext, OrchestrationRequest, RequestContext
from agent_network.store import SupabaseStore
from agent_network.utils.config import AppConfig
from agent_network.utils.exceptions import (
    AgentCatalogUnavailableError,
    MissingConfigurationError,
)
from agent_network.utils.logging import setup_logging

BACKEND_CODE = """\
Deno.serve(async (req) => {
  const { email } = await req.json();
  return new Response(JSON.stringify({ ok: true, email }));
});
"""


async def run_request(message: str, context: RequestContext | None = None) -> None:
    """요청 하나를 실행하고 Agent별 응답을 출력합니다."""
    config = AppConfig.load(yaml_path=get_config_path())
    setup_logging(level="WARNING", json_format=False)

    store = build_store(config)
    orchestrator = build_orchestrator(config, store)

    print(f"메시지: {message}")
    print("-" * 60)

    try:
        result = await orchestrator.run(
            OrchestrationRequest(message=message, context=context)
        )
    except (MissingConfigurationError, AgentCatalogUnavailableError) as e:
        print(f"오류 발생: {e.message}")
        return
    finally:
        if isinstance(store, SupabaseStore):
            await store.aclose()

    for response in result.responses:
        print(f"[{response.agent_role}] {response.agent_name}")
        print(f"  처리 시간: {response.processing_time_ms}ms")
        if response.suggested_next_agents:
            print(f"  제안: {', '.join(response.suggested_next_agents)}")

    print()
    print(f"세션: {result.session_id}")
    print(f"총 Agent 수: {result.total_agents}")
    print(f"총 처리 시간: {result.total_processing_time_ms}ms")
    print()
    print(result.summary)


async def main() -> None:
    """메인 함수."""
    print("=" * 60)
    print("Agent Network - Collaborative Request Example")
    print("=" * 60)
    print()

    await run_request(
        "revisa la seguridad de este código",
        RequestContext(code=CodeContext(backend=BACKEND_CODE)),
    )


if __name__ == "__main__":
    asyncio.run(main())
