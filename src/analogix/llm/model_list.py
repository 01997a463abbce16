"""Candidate model lists: primary + fallbacks + a known-good default.

The list for a request is built from configuration, never from the
caller: the task type only selects a pre-configured chain that is
tried ahead of the primary/fallback models.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from analogix.llm.schemas import TaskType

# Misconfigurations seen in deployments, mapped to the id the provider accepts.
KNOWN_MODEL_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "qwen/qwen2.5-72b-instruct": "Qwen/Qwen2.5-72B-Instruct",
        "qwen/qwen2.5-coder-32b-instruct": "Qwen/Qwen2.5-Coder-32B-Instruct",
        "meta-llama/llama-4-maverick-17b-instruct": (
            "meta-llama/llama-4-maverick-17b-128e-instruct"
        ),
        "meta-llama/llama-4-scout-17b-instruct": (
            "meta-llama/llama-4-scout-17b-16e-instruct"
        ),
        "gpt-oss-20b": "openai/gpt-oss-20b",
        "gpt-oss-120b": "openai/gpt-oss-120b",
    }
)


def split_models_csv(csv: str | None) -> list[str]:
    """Split a comma-separated model setting, dropping blank entries."""
    if not csv:
        return []
    return [part.strip() for part in csv.split(",") if part.strip()]


def normalize_models(
    candidates: Iterable[str | None],
    known_default: str,
    aliases: Mapping[str, str] = KNOWN_MODEL_ALIASES,
) -> list[str]:
    """Correct aliases, drop blanks and duplicates, ensure the default is last.

    First occurrence wins, so a corrected alias collapses into an
    earlier entry of the same model. known_default is appended only
    when it is not already in the list.
    """
    result: list[str] = []
    seen: set[str] = set()
    for raw in [*candidates, known_default]:
        if raw is None:
            continue
        model = raw.strip()
        if not model:
            continue
        model = aliases.get(model, model)
        if model in seen:
            continue
        seen.add(model)
        result.append(model)
    return result


def build_model_list(
    primary: str,
    fallbacks_csv: str | None,
    known_default: str,
    aliases: Mapping[str, str] = KNOWN_MODEL_ALIASES,
) -> list[str]:
    """Ordered candidates: primary, then fallbacks, then known_default."""
    models = normalize_models(
        [primary, *split_models_csv(fallbacks_csv)],
        known_default,
        aliases,
    )
    if not models:
        raise ValueError("known_default must be a non-empty model id")
    return models


@dataclass(frozen=True)
class ModelCatalog:
    """Configured model lists, one candidate list per task type."""

    primary: str
    fallbacks_csv: str
    known_default: str
    task_chains: Mapping[TaskType, tuple[str, ...]] = field(default_factory=dict)
    aliases: Mapping[str, str] = field(default_factory=lambda: KNOWN_MODEL_ALIASES)

    def candidates(self, task_type: TaskType = TaskType.DEFAULT) -> list[str]:
        """Task chain first, then primary and fallbacks, then the default."""
        chain = self.task_chains.get(task_type, ())
        return normalize_models(
            [*chain, self.primary, *split_models_csv(self.fallbacks_csv)],
            self.known_default,
            self.aliases,
        )
