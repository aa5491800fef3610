"""Follow-up suggestion extraction.

Scans an agent's output for phrases implying another role should be consulted.
The extractor is pluggable; the invoker only depends on the protocol.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Protocol, runtime_checkable

from agent_network.models import AgentRole

# Role -> trigger phrases. Matched case-insensitively as substrings.
DEFAULT_SUGGESTION_TRIGGERS: dict[str, tuple[str, ...]] = {
    AgentRole.TESTING.value: (
        "review security",
        "revisar seguridad",
        "validate",
        "validar",
    ),
    AgentRole.LEGAL.value: (
        "review license",
        "revisar licencia",
        "compliance",
    ),
    AgentRole.GOVERNANCE.value: (
        "vote",
        "votación",
        "community",
        "comunidad",
    ),
}


@runtime_checkable
class SuggestionExtractor(Protocol):
    """Maps agent output text to roles that should also be consulted."""

    def extract(self, text: str) -> list[str]:
        """Return suggested roles, de-duplicated, in a stable order."""
        ...


class KeywordSuggestionExtractor:
    """Phrase-trigger suggestion extractor.

    A role is suggested when any of its trigger phrases occurs in the
    lower-cased output. Roles are reported in trigger-table order.
    """

    def __init__(
        self,
        triggers: Mapping[str, Sequence[str]] | None = None,
    ) -> None:
        source = DEFAULT_SUGGESTION_TRIGGERS if triggers is None else triggers
        self._triggers: dict[str, tuple[str, ...]] = {
            role: tuple(phrase.lower() for phrase in phrases)
            for role, phrases in source.items()
        }

    @property
    def roles(self) -> list[str]:
        return list(self._triggers)

    def extract(self, text: str) -> list[str]:
        if not text:
            return []

        lowered = text.lower()
        return [
            role
            for role, phrases in self._triggers.items()
            if any(phrase in lowered for phrase in phrases)
        ]
