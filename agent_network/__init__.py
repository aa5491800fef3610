"""Agent Network - role-based agents collaborating on a single request."""

__version__ = "1.0.0"
