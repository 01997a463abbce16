"""Model registry: task chains, model aliases and per-model request options.

Loaded from config/models.yaml at startup, validated by Pydantic.
New aliases, task chains or model quirks are a YAML edit, no code
changes. Primary/fallback/default models come from Settings; the
registry only adds what environment variables cannot express well.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, model_validator

from analogix.llm.schemas import TaskType


class ModelOptions(BaseModel):
    """Request adjustments for one model."""

    fold_system_prompt: bool = False  # model ignores system messages
    extra_body: dict[str, Any] = {}  # provider-specific body fields


class ModelRegistryConfig(BaseModel):
    """Top-level registry: aliases + task routing + model options.

    Validates that:
    - No alias maps a model id to itself
    - Every task chain is non-empty
    """

    aliases: dict[str, str] = {}
    task_routing: dict[TaskType, list[str]] = {}
    models: dict[str, ModelOptions] = {}

    @model_validator(mode="after")
    def validate_registry(self) -> "ModelRegistryConfig":
        """Reject self-referencing aliases and empty task chains."""
        errors: list[str] = []

        for bad_id, good_id in self.aliases.items():
            if bad_id.strip() == good_id.strip():
                errors.append(f"Alias '{bad_id}' maps to itself")
            if not good_id.strip():
                errors.append(f"Alias '{bad_id}' has empty target")

        for task_type, chain in self.task_routing.items():
            if not [model for model in chain if model.strip()]:
                errors.append(f"Task '{task_type}' has empty model chain")

        if errors:
            raise ValueError(
                "Model registry validation failed:\n"
                + "\n".join(f"  - {e}" for e in errors)
            )
        return self

    def get_chain(self, task_type: TaskType) -> list[str]:
        """Pre-configured chain for a task type, empty when none is set."""
        return list(self.task_routing.get(task_type, []))

    def options_for(self, model_id: str) -> ModelOptions:
        return self.models.get(model_id) or ModelOptions()


def load_registry(config_path: Path) -> ModelRegistryConfig:
    """Load and validate model registry from YAML.

    Args:
        config_path: Path to models.yaml. Typically comes from
            Settings.model_registry_path.

    Raises:
        FileNotFoundError: if YAML file doesn't exist.
        ValueError: if YAML parsing or validation fails.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Registry config not found: {config_path}")

    try:
        raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse registry config '{config_path}': {e}") from e
    return ModelRegistryConfig.model_validate(raw or {})
