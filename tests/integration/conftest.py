"""Shared fixtures for integration tests calling the real provider."""

from collections.abc import AsyncGenerator

import pytest

from analogix.config import get_settings
from analogix.llm import CompletionRouter, create_completion_router


@pytest.fixture()
async def live_router() -> AsyncGenerator[CompletionRouter]:
    """Router built from the local .env; skips when no key is configured."""
    settings = get_settings()
    if not any(entry and entry.strip() for entry in settings.api_key_entries):
        pytest.skip("LLM_API_KEY is not configured")
    router = create_completion_router(settings, attempt_timeout=60.0)
    yield router
    await router.aclose()
