"""Factories that turn Settings into router building blocks.

Each piece is built separately so tests and alternative hosts can
swap one of them (e.g. a fake invoker) and keep the rest.
"""

import structlog

from analogix.config import RotationMode, Settings
from analogix.llm.credentials import (
    CounterRotation,
    CredentialPool,
    RotationStrategy,
    TimeBucketRotation,
)
from analogix.llm.model_list import KNOWN_MODEL_ALIASES, ModelCatalog
from analogix.llm.providers import PROVIDER_REGISTRY, CompletionInvoker
from analogix.llm.registry import ModelRegistryConfig

logger = structlog.get_logger()


def create_credential_pool(settings: Settings) -> CredentialPool:
    """Build the pool from every configured key; missing keys are skipped.

    An empty pool is not an error here: completion calls report it.
    """
    pool = CredentialPool.build(settings.api_key_entries)
    if not pool:
        logger.warning("llm_no_credentials_configured", provider=settings.llm_provider)
    elif len(pool) == 1:
        logger.warning(
            "llm_single_credential_configured",
            provider=settings.llm_provider,
            hint="add LLM_API_KEY_2 for key rotation",
        )
    else:
        logger.info(
            "llm_credentials_loaded",
            provider=settings.llm_provider,
            count=len(pool),
        )
    return pool


def create_rotation(settings: Settings) -> RotationStrategy:
    """Rotation strategy selected by Settings.llm_rotation."""
    if settings.llm_rotation == RotationMode.TIME_BUCKET:
        return TimeBucketRotation(window_seconds=settings.llm_rotation_window_seconds)
    return CounterRotation()


def create_catalog(settings: Settings, registry: ModelRegistryConfig) -> ModelCatalog:
    """Combine env model settings with the registry's chains and aliases."""
    return ModelCatalog(
        primary=settings.llm_primary_model,
        fallbacks_csv=settings.llm_fallback_models,
        known_default=settings.llm_default_model,
        task_chains={
            task_type: tuple(registry.get_chain(task_type))
            for task_type in registry.task_routing
        },
        aliases={**KNOWN_MODEL_ALIASES, **registry.aliases},
    )


def create_invoker(
    settings: Settings, registry: ModelRegistryConfig
) -> CompletionInvoker:
    """Instantiate the invoker registered for Settings.llm_provider.

    Raises:
        ValueError: unknown provider name.
    """
    invoker_cls = PROVIDER_REGISTRY.get(settings.llm_provider)
    if invoker_cls is None:
        raise ValueError(
            f"Unknown LLM provider '{settings.llm_provider}' "
            f"(known: {sorted(PROVIDER_REGISTRY)})"
        )
    return invoker_cls(  # type: ignore[call-arg]
        settings.llm_base_url,
        provider_name=settings.llm_provider,
        timeout=settings.llm_request_timeout,
        model_options=registry.models,
    )
