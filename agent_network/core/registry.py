"""Agent Registry - request-scoped catalog of active agents.

The registry fetches the active agents once per orchestration call and hands
out an immutable snapshot. There is no process-wide mutable catalog.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from agent_network.models import AgentDefinition
from agent_network.store.base import AgentCatalogStore
from agent_network.utils.exceptions import AgentCatalogUnavailableError
from agent_network.utils.logging import get_logger

logger = get_logger(__name__)


class AgentCatalog:
    """Immutable snapshot of active agents, ascending by priority.

    Agents with equal priority keep the order the store returned them in.
    """

    def __init__(self, agents: Iterable[AgentDefinition]) -> None:
        active = [agent for agent in agents if agent.is_active]
        self._agents: tuple[AgentDefinition, ...] = tuple(
            sorted(active, key=lambda agent: agent.priority)
        )

    @property
    def agents(self) -> tuple[AgentDefinition, ...]:
        return self._agents

    def roles(self) -> list[str]:
        """Distinct roles present in the catalog, in priority order."""
        seen: list[str] = []
        for agent in self._agents:
            if agent.role not in seen:
                seen.append(agent.role)
        return seen

    def first_with_role(self, role: str) -> AgentDefinition | None:
        """Highest-priority agent with the given role, if any."""
        for agent in self._agents:
            if agent.role == role:
                return agent
        return None

    def with_roles(self, roles: Iterable[str]) -> list[AgentDefinition]:
        """All agents whose role is in roles, in priority order."""
        wanted = set(roles)
        return [agent for agent in self._agents if agent.role in wanted]

    def get(self, agent_id: str) -> AgentDefinition | None:
        for agent in self._agents:
            if agent.id == agent_id:
                return agent
        return None

    def __iter__(self) -> Iterator[AgentDefinition]:
        return iter(self._agents)

    def __len__(self) -> int:
        return len(self._agents)

    def __bool__(self) -> bool:
        return bool(self._agents)

    def __contains__(self, agent_id: str) -> bool:
        return self.get(agent_id) is not None


class AgentRegistry:
    """Read-only access to the agent catalog store."""

    def __init__(self, store: AgentCatalogStore) -> None:
        self._store = store

    async def list_active_agents(self) -> AgentCatalog:
        """Fetch a snapshot of the active agents.

        Returns:
            The catalog snapshot, ascending by priority.

        Raises:
            AgentCatalogUnavailableError: If the store fails or has no active agents.
        """
        try:
            agents = await self._store.fetch_active_agents()
        except Exception as e:
            logger.error("Agent catalog fetch failed", error=type(e).__name__)
            raise AgentCatalogUnavailableError(cause=e) from e

        catalog = AgentCatalog(agents)
        if not catalog:
            logger.error("Agent catalog has no active agents")
            raise AgentCatalogUnavailableError()

        logger.debug("Agent catalog loaded", agents=len(catalog))
        return catalog
