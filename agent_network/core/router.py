"""Relevance Router - decides which agents answer a request.

Selection is a pure function of the message, the request context, the
catalog snapshot and any explicitly requested roles.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from agent_network.models import AgentDefinition, AgentRole, RequestContext

from .registry import AgentCatalog

# Role -> trigger vocabulary, matched as substrings of the lower-cased message.
DEFAULT_ROLE_KEYWORDS: dict[str, tuple[str, ...]] = {
    AgentRole.DESIGN.value: (
        "diseño", "ui", "ux", "interfaz", "colores", "tipografía", "layout",
        "visual", "estilo", "responsive", "accesibilidad",
        "design", "accessibility", "colors", "typography", "style",
    ),
    AgentRole.CODE.value: (
        "código", "componente", "función", "react", "typescript", "implementar",
        "crear", "desarrollar", "edge function", "api",
        "code", "component", "function", "implement", "create", "develop",
    ),
    AgentRole.TESTING.value: (
        "test", "prueba", "validar", "bug", "error", "seguridad",
        "vulnerabilidad", "revisar", "calidad",
        "security", "vulnerability", "validate", "review", "quality",
    ),
    AgentRole.LEGAL.value: (
        "licencia", "copyright", "gdpr", "privacidad", "términos", "legal",
        "compliance", "derechos",
        "license", "privacy", "terms", "rights",
    ),
    AgentRole.GOVERNANCE.value: (
        "votación", "votar", "comunidad", "aprobar", "rechazar", "consenso",
        "propuesta", "gobernanza",
        "vote", "community", "approve", "reject", "consensus", "proposal",
        "governance",
    ),
}

# Roles forced in when the request carries frontend or backend code.
CODE_CONTEXT_ROLES: tuple[str, ...] = (AgentRole.CODE.value, AgentRole.TESTING.value)

DEFAULT_ROLE = AgentRole.CODE.value


class RelevanceRouter:
    """Keyword relevance router.

    Routing priority:
    1. Explicitly requested roles (exclusive, no fallback)
    2. Keyword relevance per role
    3. Code context forces the code and testing agents in
    4. The code agent when nothing matched
    """

    def __init__(
        self,
        role_keywords: Mapping[str, Sequence[str]] | None = None,
        default_role: str = DEFAULT_ROLE,
    ) -> None:
        source = DEFAULT_ROLE_KEYWORDS if role_keywords is None else role_keywords
        self._role_keywords: dict[str, tuple[str, ...]] = {
            role: tuple(keyword.lower() for keyword in keywords)
            for role, keywords in source.items()
        }
        self._default_role = default_role

    def matched_roles(self, message: str) -> list[str]:
        """Roles whose vocabulary occurs in the message."""
        lowered = message.lower()
        return [
            role
            for role, keywords in self._role_keywords.items()
            if any(keyword in lowered for keyword in keywords)
        ]

    def select_agents(
        self,
        message: str,
        context: RequestContext | None,
        catalog: AgentCatalog,
        explicit_roles: Sequence[str] | None = None,
    ) -> list[AgentDefinition]:
        """Select the first-pass agents for a request.

        Args:
            message: The user message.
            context: Optional request context.
            catalog: Snapshot of active agents.
            explicit_roles: Roles requested by the caller, if any.

        Returns:
            De-duplicated agents ascending by priority. Empty only when
            explicit roles match nothing in the catalog.
        """
        if explicit_roles:
            return catalog.with_roles(explicit_roles)

        matched = set(self.matched_roles(message))
        selected = [agent for agent in catalog if agent.role in matched]

        if context is not None and context.has_source_artifacts():
            for role in CODE_CONTEXT_ROLES:
                agent = catalog.first_with_role(role)
                if agent is not None:
                    selected.append(agent)

        if not selected:
            agent = catalog.first_with_role(self._default_role)
            if agent is not None:
                selected.append(agent)

        return _order_by_priority(selected)


def _order_by_priority(agents: list[AgentDefinition]) -> list[AgentDefinition]:
    unique: dict[str, AgentDefinition] = {}
    for agent in agents:
        unique.setdefault(agent.id, agent)
    return sorted(unique.values(), key=lambda agent: agent.priority)
