"""OpenAI-compatible chat-completions invoker (Groq, HF router, OpenAI)."""

from collections.abc import Mapping
from typing import Any

import httpx
import openai
import structlog

from analogix.errors import ProviderError
from analogix.llm.credentials import Credential
from analogix.llm.error_messages import extract_message
from analogix.llm.providers.base import CompletionInvoker
from analogix.llm.registry import ModelOptions
from analogix.llm.retry import FailureKind
from analogix.llm.schemas import CompletionRequest, fold_system_prompt

logger = structlog.get_logger()


class OpenAICompatInvoker(CompletionInvoker):
    """Invoker for any endpoint speaking the OpenAI chat-completions API.

    One SDK client is kept per credential; all of them share a single
    httpx connection pool. SDK retries are disabled because a retry
    must move to the next credential, which only the router can do.
    """

    def __init__(
        self,
        base_url: str,
        *,
        provider_name: str = "openai",
        timeout: float = 30.0,
        model_options: Mapping[str, ModelOptions] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.provider_name = provider_name
        self._base_url = base_url
        self._timeout = timeout
        self._model_options = dict(model_options or {})
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
        )
        self._clients: dict[str, openai.AsyncOpenAI] = {}

    def _client_for(self, credential: Credential) -> openai.AsyncOpenAI:
        client = self._clients.get(credential.secret)
        if client is None:
            client = openai.AsyncOpenAI(
                api_key=credential.secret,
                base_url=self._base_url,
                max_retries=0,
                timeout=self._timeout,
                http_client=self._http_client,
            )
            self._clients[credential.secret] = client
        return client

    def _build_kwargs(self, model: str, request: CompletionRequest) -> dict[str, Any]:
        options = self._model_options.get(model) or ModelOptions()
        if options.fold_system_prompt:
            request = request.with_messages(fold_system_prompt(request.messages))

        kwargs: dict[str, Any] = {
            "model": model,
            "messages": request.as_payload(),
            "max_tokens": request.max_tokens,
            "temperature": request.temperature,
        }
        if options.extra_body:
            kwargs["extra_body"] = dict(options.extra_body)
        return kwargs

    async def invoke(
        self,
        model: str,
        credential: Credential,
        request: CompletionRequest,
    ) -> str:
        """Send one chat-completions request and return the reply text."""
        client = self._client_for(credential)
        kwargs = self._build_kwargs(model, request)

        try:
            with self._measure_latency() as timer:
                # The SDK accepts plain dicts for messages at runtime.
                response = await client.chat.completions.create(**kwargs)
        except openai.APIStatusError as exc:
            message = extract_message(exc.response.text, exc.response.reason_phrase)
            raise ProviderError(
                model,
                message,
                provider=self.provider_name,
                status_code=exc.status_code,
            ) from exc
        except openai.APITimeoutError as exc:
            raise ProviderError(
                model,
                f"request timed out after {self._timeout:g}s",
                provider=self.provider_name,
                kind=FailureKind.TRANSIENT,
            ) from exc
        except openai.APIConnectionError as exc:
            raise ProviderError(
                model,
                f"connection failed: {exc}",
                provider=self.provider_name,
                kind=FailureKind.TRANSIENT,
            ) from exc
        except openai.OpenAIError as exc:
            raise ProviderError(
                model,
                str(exc) or type(exc).__name__,
                provider=self.provider_name,
                status_code=getattr(exc, "status_code", None),
            ) from exc

        logger.debug(
            "llm_provider_response",
            provider=self.provider_name,
            model=model,
            credential_index=credential.index,
            latency_ms=timer.elapsed_ms,
        )
        choices = getattr(response, "choices", None) or []
        if not choices:
            return ""
        message = getattr(choices[0], "message", None)
        return getattr(message, "content", None) or ""

    async def aclose(self) -> None:
        """Close the shared HTTP client if this invoker created it."""
        self._clients.clear()
        if self._owns_http_client:
            await self._http_client.aclose()
