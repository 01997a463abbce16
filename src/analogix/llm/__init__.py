"""Completion router: credential rotation, retries and model fallback.

Quick start::

    from analogix.config import get_settings
    from analogix.llm import create_completion_router

    router = create_completion_router(get_settings())
    reply = await router.complete(
        [{"role": "user", "content": "Explain fractions with football"}],
        max_tokens=512,
        temperature=0.7,
    )
"""

from analogix.llm.classifier import classify_task_type
from analogix.llm.credentials import (
    CounterRotation,
    Credential,
    CredentialPool,
    RotationStrategy,
    TimeBucketRotation,
    credential_for,
)
from analogix.llm.error_messages import extract_message, format_error
from analogix.llm.model_list import ModelCatalog, build_model_list
from analogix.llm.retry import FailureKind, RetryPolicy
from analogix.llm.router import AllModelsFailedError, CompletionRouter
from analogix.llm.schemas import ChatMessage, CompletionRequest, Role, TaskType
from analogix.llm.setup import create_completion_router
from analogix.llm.structured import StructuredOutputError

__all__ = [
    "AllModelsFailedError",
    "ChatMessage",
    "CompletionRequest",
    "CompletionRouter",
    "CounterRotation",
    "Credential",
    "CredentialPool",
    "FailureKind",
    "ModelCatalog",
    "RetryPolicy",
    "Role",
    "RotationStrategy",
    "StructuredOutputError",
    "TaskType",
    "TimeBucketRotation",
    "build_model_list",
    "classify_task_type",
    "create_completion_router",
    "credential_for",
    "extract_message",
    "format_error",
]
