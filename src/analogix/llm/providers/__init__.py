"""Completion invoker implementations.

PROVIDER_REGISTRY maps provider names (Settings.llm_provider) to
their invoker classes. To add a provider with a non-OpenAI wire
format:

1. Create a new module in this package
2. Implement CompletionInvoker subclass
3. Add entry to PROVIDER_REGISTRY below
"""

from analogix.llm.providers.base import CompletionInvoker
from analogix.llm.providers.openai_compat import OpenAICompatInvoker

PROVIDER_REGISTRY: dict[str, type[CompletionInvoker]] = {
    "groq": OpenAICompatInvoker,
    "huggingface": OpenAICompatInvoker,
    "openai": OpenAICompatInvoker,
}

__all__ = [
    "PROVIDER_REGISTRY",
    "CompletionInvoker",
    "OpenAICompatInvoker",
]
