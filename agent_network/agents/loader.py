"""Agent Loader - agent catalog definitions from YAML configuration.

This module loads AgentDefinition entries from YAML files so the in-memory
catalog can be seeded without a hosted database.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from agent_network.models import AgentDefinition, AgentRole
from agent_network.utils.logging import get_logger

logger = get_logger(__name__)


class AgentLoadError(Exception):
    """Raised when agent loading fails."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (path: {path})" if path else ""))


class AgentConfigError(AgentLoadError):
    """Raised when agent configuration is invalid."""

    pass


class AgentLoader:
    """Loader for agent definitions stored as YAML files.

    Supports loading a single definition or every definition in a directory.
    """

    def __init__(self) -> None:
        self._loaded: dict[str, AgentDefinition] = {}

    def load_from_yaml(self, path: str | Path) -> AgentDefinition:
        """Load an agent definition from a YAML file.

        Args:
            path: Path to the YAML file.

        Returns:
            The parsed agent definition.

        Raises:
            AgentLoadError: If the file cannot be read.
            AgentConfigError: If the definition is invalid.
        """
        path = Path(path)

        if not path.exists():
            raise AgentLoadError("Configuration file not found", str(path))

        if not path.is_file():
            raise AgentLoadError("Path is not a file", str(path))

        try:
            with open(path, encoding="utf-8") as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise AgentLoadError(f"Invalid YAML: {e}", str(path)) from e
        except OSError as e:
            raise AgentLoadError(f"Cannot read file: {e}", str(path)) from e

        if not config_data:
            raise AgentConfigError("Empty configuration file", str(path))

        if not isinstance(config_data, dict):
            raise AgentConfigError("Configuration must be a mapping", str(path))

        definition = self.create_definition(config_data, source_path=str(path))
        self._loaded[definition.id] = definition
        return definition

    def load_all_from_directory(self, dir_path: str | Path) -> list[AgentDefinition]:
        """Load every agent definition in a directory.

        Files that fail to load are skipped and logged unless none load.

        Args:
            dir_path: Directory containing *.yaml / *.yml files.

        Returns:
            Loaded definitions, ascending by priority.

        Raises:
            AgentLoadError: If the directory is unusable or nothing loads.
        """
        dir_path = Path(dir_path)

        if not dir_path.exists():
            raise AgentLoadError("Directory not found", str(dir_path))

        if not dir_path.is_dir():
            raise AgentLoadError("Path is not a directory", str(dir_path))

        definitions: list[AgentDefinition] = []
        errors: list[str] = []

        files = sorted([*dir_path.glob("*.yaml"), *dir_path.glob("*.yml")])
        for yaml_file in files:
            try:
                definitions.append(self.load_from_yaml(yaml_file))
            except AgentLoadError as e:
                logger.warning("Skipping agent definition", error=str(e))
                errors.append(str(e))

        if errors and not definitions:
            raise AgentLoadError(
                f"Failed to load any agents. Errors: {'; '.join(errors)}",
                str(dir_path),
            )

        return sorted(definitions, key=lambda d: d.priority)

    def create_definition(
        self,
        config_data: dict[str, Any],
        source_path: str | None = None,
    ) -> AgentDefinition:
        """Create an agent definition from a configuration dictionary.

        Raises:
            AgentConfigError: If the configuration is invalid.
        """
        errors = validate_yaml_schema(config_data)
        if errors:
            raise AgentConfigError(
                f"Invalid agent configuration: {'; '.join(errors)}", source_path
            )

        try:
            return AgentDefinition.model_validate(config_data)
        except ValidationError as e:
            raise AgentConfigError(
                f"Invalid agent configuration: {e}", source_path
            ) from e

    def get_loaded(self, agent_id: str) -> AgentDefinition | None:
        return self._loaded.get(agent_id)

    def get_all_loaded(self) -> dict[str, AgentDefinition]:
        return dict(self._loaded)

    def clear(self) -> None:
        self._loaded.clear()


def validate_yaml_schema(config_data: dict[str, Any]) -> list[str]:
    """Validate an agent definition mapping.

    Unknown roles are accepted but logged, since the catalog tolerates them.

    Args:
        config_data: Configuration dictionary to validate.

    Returns:
        List of validation error messages (empty if valid).
    """
    errors: list[str] = []

    for field in ("id", "name", "role"):
        if field not in config_data:
            errors.append(f"Missing required field: {field}")
        elif not isinstance(config_data[field], str) or not config_data[field]:
            errors.append(f"{field} must be a non-empty string")

    role = config_data.get("role")
    if isinstance(role, str) and role not in {r.value for r in AgentRole}:
        logger.info("Agent declares an unknown role", role=role)

    capabilities = config_data.get("capabilities", [])
    if not isinstance(capabilities, list):
        errors.append("capabilities must be a list")
    else:
        for i, cap in enumerate(capabilities):
            if not isinstance(cap, str):
                errors.append(f"capabilities[{i}] must be a string")

    if "priority" in config_data and not isinstance(config_data["priority"], int):
        errors.append("priority must be an integer")

    if "max_tokens" in config_data:
        max_tokens = config_data["max_tokens"]
        if not isinstance(max_tokens, int) or max_tokens < 1:
            errors.append("max_tokens must be a positive integer")

    if "temperature" in config_data:
        temperature = config_data["temperature"]
        if (
            not isinstance(temperature, (int, float))
            or temperature < 0
            or temperature > 2
        ):
            errors.append("temperature must be a number between 0 and 2")

    return errors
