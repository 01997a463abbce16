"""Tests for failure classification and retry policies."""

import pytest

from analogix.errors import AttemptTimeoutError, ProviderError
from analogix.llm.retry import FailureKind, RetryPolicy, classify_failure
from analogix.llm.structured import StructuredOutputError


def _http_error(status: int, message: str = "error") -> ProviderError:
    return ProviderError("m", message, provider="groq", status_code=status)


class TestClassifyFailure:
    @pytest.mark.parametrize(
        ("status", "kind"),
        [
            (401, FailureKind.AUTH),
            (403, FailureKind.AUTH),
            (429, FailureKind.RATE_LIMITED),
            (402, FailureKind.RATE_LIMITED),
            (404, FailureKind.MODEL_UNAVAILABLE),
            (400, FailureKind.REJECTED),
            (422, FailureKind.REJECTED),
            (500, FailureKind.TRANSIENT),
            (503, FailureKind.TRANSIENT),
        ],
    )
    def test_http_status(self, status: int, kind: FailureKind) -> None:
        assert classify_failure(_http_error(status)) is kind

    def test_400_with_model_hint_is_model_unavailable(self) -> None:
        exc = _http_error(400, "The model `foo` does not exist")
        assert classify_failure(exc) is FailureKind.MODEL_UNAVAILABLE

    def test_decommissioned_model_message(self) -> None:
        exc = _http_error(400, "model llama3-70b has been decommissioned")
        assert classify_failure(exc) is FailureKind.MODEL_UNAVAILABLE

    def test_explicit_kind_wins(self) -> None:
        exc = ProviderError("m", "timeout", kind=FailureKind.TRANSIENT)
        assert classify_failure(exc) is FailureKind.TRANSIENT

    def test_timeout_is_transient(self) -> None:
        assert classify_failure(AttemptTimeoutError("m", 5)) is FailureKind.TRANSIENT

    def test_structured_output_is_invalid_output(self) -> None:
        exc = StructuredOutputError("m", "not json", "Quiz")
        assert classify_failure(exc) is FailureKind.INVALID_OUTPUT

    def test_duck_typed_sdk_error(self) -> None:
        class FakeAuthError(Exception):
            status_code = 401

        assert classify_failure(FakeAuthError("unauthorized")) is FailureKind.AUTH

    def test_unknown_exception_is_transient(self) -> None:
        assert classify_failure(Exception("network down")) is FailureKind.TRANSIENT

    def test_model_hint_without_status(self) -> None:
        exc = Exception("model not supported by provider")
        assert classify_failure(exc) is FailureKind.MODEL_UNAVAILABLE


class TestRetryPolicy:
    @pytest.mark.parametrize("kind", list(FailureKind))
    def test_blanket_retries_everything(self, kind: FailureKind) -> None:
        assert RetryPolicy.BLANKET.should_try_next_credential(kind) is True

    def test_strict_skips_model_unavailable(self) -> None:
        policy = RetryPolicy.STRICT
        assert policy.should_try_next_credential(FailureKind.MODEL_UNAVAILABLE) is False

    @pytest.mark.parametrize(
        "kind",
        [FailureKind.AUTH, FailureKind.RATE_LIMITED, FailureKind.TRANSIENT],
    )
    def test_strict_retries_credential_level_failures(self, kind: FailureKind) -> None:
        assert RetryPolicy.STRICT.should_try_next_credential(kind) is True

    def test_policy_from_setting_value(self) -> None:
        assert RetryPolicy("strict") is RetryPolicy.STRICT
