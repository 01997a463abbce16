"""Failure classification and the credential-retry policy."""

from enum import StrEnum

# Phrases providers use when the model itself is unusable.
_MODEL_UNAVAILABLE_HINTS: tuple[str, ...] = (
    "model_not_found",
    "model not found",
    "does not exist",
    "not supported",
    "unknown model",
    "no such model",
    "decommissioned",
)


class FailureKind(StrEnum):
    TRANSIENT = "transient"  # network, timeout, 5xx
    AUTH = "auth"  # 401, 403
    RATE_LIMITED = "rate_limited"  # 429, 402 quota
    MODEL_UNAVAILABLE = "model_unavailable"  # 404, "model not supported"
    REJECTED = "rejected"  # other 4xx
    INVALID_OUTPUT = "invalid_output"  # reply not parseable


class RetryPolicy(StrEnum):
    """When a failed attempt should move on to the next credential.

    BLANKET retries every failure with the next key before falling back
    to the next model. STRICT sends model-level failures straight to the
    next model, since another key cannot fix a missing model.
    """

    BLANKET = "blanket"
    STRICT = "strict"

    def should_try_next_credential(self, kind: FailureKind) -> bool:
        if self is RetryPolicy.BLANKET:
            return True
        return kind is not FailureKind.MODEL_UNAVAILABLE


def classify_failure(exc: BaseException) -> FailureKind:
    """Classify a failed attempt.

    Uses duck typing (``kind`` / ``status_code`` attributes) so it works
    for CompletionAttemptError and for raw SDK errors alike. Unknown
    exception types default to transient.
    """
    kind = getattr(exc, "kind", None)
    if isinstance(kind, FailureKind):
        return kind

    message = str(exc).lower()
    model_hint = any(hint in message for hint in _MODEL_UNAVAILABLE_HINTS)

    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        if status_code in (401, 403):
            return FailureKind.AUTH
        if status_code in (402, 429):
            return FailureKind.RATE_LIMITED
        if status_code == 404 or (status_code == 400 and model_hint):
            return FailureKind.MODEL_UNAVAILABLE
        if 400 <= status_code < 500:
            return FailureKind.REJECTED
        return FailureKind.TRANSIENT

    if model_hint and "model" in message:
        return FailureKind.MODEL_UNAVAILABLE
    return FailureKind.TRANSIENT
