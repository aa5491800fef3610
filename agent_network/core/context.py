"""Response Accumulator - the ordered responses of one orchestration call."""

from __future__ import annotations

from collections.abc import Iterator

from agent_network.models import AgentResponse


class ResponseAccumulator:
    """Append-only list of the responses produced within one request.

    Each invocation receives a snapshot, so an agent only ever sees the
    responses produced before it (a strict prefix).
    """

    def __init__(self) -> None:
        self._responses: list[AgentResponse] = []

    def append(self, response: AgentResponse) -> None:
        self._responses.append(response)

    def snapshot(self) -> tuple[AgentResponse, ...]:
        """Immutable view of the responses so far."""
        return tuple(self._responses)

    def agent_ids(self) -> list[str]:
        """Responding agent ids, de-duplicated, in invocation order."""
        ids: list[str] = []
        for response in self._responses:
            if response.agent_id not in ids:
                ids.append(response.agent_id)
        return ids

    def total_processing_time_ms(self) -> int:
        return sum(response.processing_time_ms for response in self._responses)

    def __len__(self) -> int:
        return len(self._responses)

    def __iter__(self) -> Iterator[AgentResponse]:
        return iter(self._responses)
