"""CompletionRouter -- central entry point for all LLM calls.

Two-level fallback per logical request:
1. Within a model: credential base -> base+1 -> ... (each key once)
2. Between models: candidate 1 -> candidate 2 -> ... -> known default

The rotation base is drawn once per logical request and reused for
every model, so consecutive requests start on different keys.
"""

import asyncio
import time
import uuid
from collections.abc import Awaitable, Callable, Iterable, Mapping
from typing import Any, TypeVar

import structlog
from pydantic import BaseModel

from analogix.errors import (
    AttemptTimeoutError,
    CompletionAttemptError,
    CompletionError,
    NoCredentialsError,
    ProviderError,
)
from analogix.llm.credentials import (
    Credential,
    CounterRotation,
    CredentialPool,
    RotationStrategy,
    credential_for,
)
from analogix.llm.error_messages import format_error
from analogix.llm.model_list import ModelCatalog
from analogix.llm.providers.base import CompletionInvoker
from analogix.llm.retry import RetryPolicy, classify_failure
from analogix.llm.schemas import (
    ChatMessage,
    CompletionAttempt,
    CompletionRequest,
    TaskType,
)
from analogix.llm.structured import parse_structured

logger = structlog.get_logger()

LogCallback = Callable[[CompletionAttempt, bool, str | None], Awaitable[None]]

# One attempt for one (model, credential) pair.
_T = TypeVar("_T")
_CallFn = Callable[[str, Credential], Awaitable[_T]]

NO_PROVIDER_MESSAGE = "No completion provider available"


class AllModelsFailedError(CompletionError):
    """Every candidate model failed with every credential.

    The message is the last observed error; ``errors`` keeps every
    (model, message) pair in attempt order.
    """

    def __init__(
        self,
        task_type: TaskType,
        models_tried: list[str],
        errors: list[tuple[str, str]],
        last_error: CompletionAttemptError | None,
    ) -> None:
        self.task_type = task_type
        self.models_tried = models_tried
        self.errors = errors
        self.last_error = last_error
        super().__init__(last_error.message if last_error else NO_PROVIDER_MESSAGE)


class CompletionRouter:
    """Routes completion requests across credentials and candidate models.

    Attempts run strictly in order, one at a time: model 1 with every
    credential, then model 2, and so on. Cancelling the awaiting task
    stops the chain; no further attempt is started.
    """

    def __init__(
        self,
        pool: CredentialPool,
        invoker: CompletionInvoker,
        catalog: ModelCatalog,
        *,
        rotation: RotationStrategy | None = None,
        retry_policy: RetryPolicy = RetryPolicy.BLANKET,
        attempt_timeout: float | None = None,
        log_callback: LogCallback | None = None,
    ) -> None:
        self._pool = pool
        self._invoker = invoker
        self._catalog = catalog
        self._rotation = rotation or CounterRotation()
        self._retry_policy = retry_policy
        self._attempt_timeout = attempt_timeout
        self._log_callback = log_callback

    @property
    def provider_name(self) -> str:
        return self._invoker.provider_name or "LLM"

    async def complete(
        self,
        messages: Iterable[ChatMessage | Mapping[str, str]],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        task_type: TaskType = TaskType.DEFAULT,
    ) -> str:
        """Generate a chat reply with credential rotation and model fallback.

        Returns the reply text, which may legitimately be empty.

        Raises:
            NoCredentialsError: no API key configured; nothing was sent.
            AllModelsFailedError: every model/credential pair failed.
        """
        request = CompletionRequest(
            messages=tuple(messages),  # type: ignore[arg-type]
            max_tokens=max_tokens,
            temperature=temperature,
        )
        return await self.complete_request(request, task_type=task_type)

    async def complete_request(
        self,
        request: CompletionRequest,
        *,
        task_type: TaskType = TaskType.DEFAULT,
    ) -> str:
        """Same as complete() for a prebuilt request."""

        async def call_fn(model: str, credential: Credential) -> str:
            return await self._invoker.invoke(model, credential, request)

        return await self._execute_with_fallback(task_type, call_fn)

    async def complete_structured(
        self,
        messages: Iterable[ChatMessage | Mapping[str, str]],
        response_schema: type[BaseModel],
        *,
        max_tokens: int = 1024,
        temperature: float = 0.7,
        task_type: TaskType = TaskType.DEFAULT,
    ) -> tuple[Any, str]:
        """Generate a JSON reply validated against response_schema.

        An unparseable reply counts as a failed attempt and moves on to
        the next credential / model like any provider error.

        Returns:
            Tuple of (parsed_object, raw_reply_text).
        """
        request = CompletionRequest(
            messages=tuple(messages),  # type: ignore[arg-type]
            max_tokens=max_tokens,
            temperature=temperature,
        )

        async def call_fn(model: str, credential: Credential) -> tuple[Any, str]:
            text = await self._invoker.invoke(model, credential, request)
            return parse_structured(text, response_schema, model), text

        return await self._execute_with_fallback(task_type, call_fn)

    async def aclose(self) -> None:
        """Release the invoker's HTTP connections."""
        await self._invoker.aclose()

    # -- internal: model x credential walk ---------------------------------

    async def _execute_with_fallback(
        self,
        task_type: TaskType,
        call_fn: _CallFn[_T],
    ) -> _T:
        pool_size = len(self._pool)
        if pool_size == 0:
            logger.error("llm_no_credentials_configured", provider=self.provider_name)
            raise NoCredentialsError(self.provider_name)

        # Every log line of this logical request carries the same id.
        with structlog.contextvars.bound_contextvars(request_id=uuid.uuid4().hex[:12]):
            return await self._walk(task_type, call_fn, pool_size)

    async def _walk(
        self,
        task_type: TaskType,
        call_fn: _CallFn[_T],
        pool_size: int,
    ) -> _T:
        models = self._catalog.candidates(task_type)
        base = self._rotation.next_base(pool_size)
        logger.info(
            "llm_request_started",
            provider=self.provider_name,
            task_type=task_type.value,
            models=models,
            rotation_base=base,
        )

        errors: list[tuple[str, str]] = []
        models_tried: list[str] = []
        last_error: CompletionAttemptError | None = None

        for model in models:
            models_tried.append(model)
            for retry_offset in range(pool_size):
                credential = credential_for(base, retry_offset, self._pool)
                if credential is None:
                    break

                attempt = CompletionAttempt(
                    model_id=model,
                    provider=self.provider_name,
                    credential_index=credential.index,
                    retry_offset=retry_offset,
                    task_type=task_type,
                )
                start = time.perf_counter()
                try:
                    result = await self._attempt(call_fn, model, credential)
                except CompletionAttemptError as exc:
                    attempt.latency_ms = int((time.perf_counter() - start) * 1000)
                    kind = classify_failure(exc)
                    exc.kind = kind
                    last_error = exc
                    errors.append((model, exc.message))
                    logger.warning(
                        "llm_attempt_failed",
                        provider=self.provider_name,
                        model=model,
                        credential_index=credential.index,
                        attempt=retry_offset + 1,
                        max_attempts=pool_size,
                        failure_kind=kind.value,
                        error=exc.message,
                    )
                    await self._log(attempt, success=False, error_message=exc.message)
                    if not self._retry_policy.should_try_next_credential(kind):
                        logger.info(
                            "llm_model_unavailable_skipping_credentials",
                            model=model,
                            failure_kind=kind.value,
                        )
                        break
                    continue

                attempt.latency_ms = int((time.perf_counter() - start) * 1000)
                await self._log(attempt, success=True)
                return result

            logger.warning(
                "llm_model_exhausted_falling_back",
                provider=self.provider_name,
                model=model,
                error=last_error.message if last_error else None,
            )

        logger.error(
            "llm_all_models_failed",
            provider=self.provider_name,
            task_type=task_type.value,
            models_tried=models_tried,
            attempts=len(errors),
        )
        raise AllModelsFailedError(task_type, models_tried, errors, last_error)

    async def _attempt(
        self,
        call_fn: _CallFn[_T],
        model: str,
        credential: Credential,
    ) -> _T:
        """Run one attempt under the per-attempt timeout.

        Anything other than a CompletionAttemptError is wrapped so raw
        SDK/network types never reach the caller. CancelledError is a
        BaseException and passes through untouched.
        """
        try:
            async with asyncio.timeout(self._attempt_timeout):
                return await call_fn(model, credential)
        except CompletionAttemptError:
            raise
        except TimeoutError as exc:
            if self._attempt_timeout is None:
                raise ProviderError(
                    model, format_error(exc), provider=self.provider_name
                ) from exc
            raise AttemptTimeoutError(model, self._attempt_timeout) from exc
        except Exception as exc:
            raise ProviderError(
                model, format_error(exc), provider=self.provider_name
            ) from exc

    # -- helpers -------------------------------------------------------------

    async def _log(
        self,
        attempt: CompletionAttempt,
        *,
        success: bool,
        error_message: str | None = None,
    ) -> None:
        """Report an attempt via structlog and the optional callback.

        Callback errors are logged and swallowed -- they must never
        interrupt the completion flow.
        """
        if success:
            logger.info(
                "llm_call_completed",
                provider=attempt.provider,
                model=attempt.model_id,
                task_type=attempt.task_type.value,
                credential_index=attempt.credential_index,
                retry_offset=attempt.retry_offset,
                latency_ms=attempt.latency_ms,
            )
        if self._log_callback is None:
            return
        try:
            await self._log_callback(attempt, success, error_message)
        except Exception:
            logger.error(
                "llm_log_callback_failed",
                model=attempt.model_id,
                exc_info=True,
            )
