"""Domain-specific exceptions for analogix.

Callers of the completion router only ever see CompletionError
subclasses; SDK and network exception types stay inside the invoker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from analogix.llm.retry import FailureKind


class CompletionError(Exception):
    """Base class for every error raised by the completion stack."""


class ConfigurationError(CompletionError):
    """The router cannot run with the current configuration."""


class NoCredentialsError(ConfigurationError):
    """No API key is configured, so no provider call can be made."""

    def __init__(self, provider: str = "LLM") -> None:
        self.provider = provider
        super().__init__(
            f"No {provider} API keys configured "
            "(set LLM_API_KEY / LLM_API_KEY_2 in .env and restart the server)"
        )


class CompletionAttemptError(CompletionError):
    """One (model, credential) attempt failed.

    Attributes:
        model: Model identifier the attempt was made with.
        message: Normalized, displayable error message.
        status_code: HTTP status, None for network-level failures.
        kind: Failure classification, None until classified.
    """

    def __init__(
        self,
        model: str,
        message: str,
        *,
        status_code: int | None = None,
        kind: FailureKind | None = None,
    ) -> None:
        self.model = model
        self.message = message
        self.status_code = status_code
        self.kind = kind
        super().__init__(message)


class ProviderError(CompletionAttemptError):
    """Provider returned a non-2xx response or could not be reached."""

    def __init__(
        self,
        model: str,
        message: str,
        *,
        provider: str = "",
        status_code: int | None = None,
        kind: FailureKind | None = None,
    ) -> None:
        self.provider = provider
        label = f"{provider} API error" if provider else "API error"
        if status_code is not None:
            text = f"{label}: {status_code} - {message}"
        else:
            text = f"{label}: {message}"
        super().__init__(model, text, status_code=status_code, kind=kind)
        self.detail = message


class AttemptTimeoutError(CompletionAttemptError):
    """A single attempt exceeded its time budget."""

    def __init__(self, model: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(model, f"Request to {model} timed out after {timeout:g}s")
