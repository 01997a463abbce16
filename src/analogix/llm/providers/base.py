"""Abstract completion invoker interface."""

import abc
import time

from analogix.llm.credentials import Credential
from analogix.llm.schemas import CompletionRequest


class CompletionInvoker(abc.ABC):
    """Performs one network call for one (model, credential) pair.

    Implementations never retry; the router owns retries and fallback.
    Every failure must surface as a CompletionAttemptError subclass
    carrying the HTTP status (when there is one) and a normalized
    message.
    """

    provider_name: str = ""

    @abc.abstractmethod
    async def invoke(
        self,
        model: str,
        credential: Credential,
        request: CompletionRequest,
    ) -> str:
        """Return the first choice's text ("" when the provider sent none).

        Raises:
            CompletionAttemptError: the call failed.
        """
        ...

    async def aclose(self) -> None:
        """Release network resources held by the invoker."""
        return None

    def _measure_latency(self) -> "_LatencyTimer":
        """Context manager for measuring call latency."""
        return _LatencyTimer()


class _LatencyTimer:
    """Simple latency measurement helper."""

    def __init__(self) -> None:
        self.start: float = 0
        self.elapsed_ms: int = 0

    def __enter__(self) -> "_LatencyTimer":
        self.start = time.perf_counter()
        return self

    def __exit__(self, *args: object) -> None:
        self.elapsed_ms = int((time.perf_counter() - self.start) * 1000)
