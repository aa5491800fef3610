"""Persistence adapters for the agent catalog and collaboration sessions."""

from .base import AgentCatalogStore, SessionStore
from .memory import InMemoryStore
from .supabase import SupabaseStore

__all__ = [
    "AgentCatalogStore",
    "SessionStore",
    "InMemoryStore",
    "SupabaseStore",
]
