"""One-stop factory for assembling the full completion stack.

Usage::

    from analogix.config import get_settings
    from analogix.llm import create_completion_router

    router = create_completion_router(get_settings())
    reply = await router.complete(messages, max_tokens=100, temperature=0.3)
"""

import structlog

from analogix.config import Settings
from analogix.llm.factory import (
    create_catalog,
    create_credential_pool,
    create_invoker,
    create_rotation,
)
from analogix.llm.registry import ModelRegistryConfig, load_registry
from analogix.llm.retry import RetryPolicy
from analogix.llm.router import CompletionRouter, LogCallback

logger = structlog.get_logger()


def create_completion_router(
    settings: Settings,
    *,
    attempt_timeout: float | None = None,
    log_callback: LogCallback | None = None,
) -> CompletionRouter:
    """Assemble CompletionRouter with credentials, models and invoker.

    Args:
        settings: Application settings with API keys and model lists.
        attempt_timeout: Hard per-attempt limit in seconds, on top of the
            SDK's request timeout. None keeps only the SDK timeout.
        log_callback: Awaited after every attempt.

    Returns:
        Configured CompletionRouter ready for use. Missing API keys do
        not fail here; they fail each completion call instead.
    """
    if settings.model_registry_path.exists():
        registry = load_registry(settings.model_registry_path)
    else:
        logger.warning(
            "model_registry_not_found",
            path=str(settings.model_registry_path),
        )
        registry = ModelRegistryConfig()

    pool = create_credential_pool(settings)
    catalog = create_catalog(settings, registry)
    router = CompletionRouter(
        pool=pool,
        invoker=create_invoker(settings, registry),
        catalog=catalog,
        rotation=create_rotation(settings),
        retry_policy=RetryPolicy(settings.llm_retry_policy),
        attempt_timeout=attempt_timeout,
        log_callback=log_callback,
    )
    logger.info(
        "completion_router_created",
        provider=settings.llm_provider,
        credentials=len(pool),
        models=catalog.candidates(),
        rotation=settings.llm_rotation.value,
        retry_policy=settings.llm_retry_policy,
    )
    return router
