"""Credential pool, rotation strategies and the retry walker.

A logical request draws one rotation base from its RotationStrategy,
then walks the pool with credential_for(base, offset) on each retry:

    base = rotation.next_base(len(pool))
    for offset in range(len(pool)):
        credential = credential_for(base, offset, pool)

Offsets 0..len(pool)-1 always yield distinct credentials, so a retry
never reuses the key that just failed.
"""

import abc
import threading
import time
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from pydantic import SecretStr


@dataclass(frozen=True)
class Credential:
    """One API key, identified by its pool position."""

    index: int
    secret: str = field(repr=False)


class CredentialPool:
    """Ordered, immutable list of usable API keys for one provider."""

    def __init__(self, secrets: Iterable[str] = ()) -> None:
        self._credentials: tuple[Credential, ...] = tuple(
            Credential(index=i, secret=secret) for i, secret in enumerate(secrets)
        )

    @classmethod
    def build(
        cls, raw_entries: Iterable[str | SecretStr | None]
    ) -> "CredentialPool":
        """Build a pool from configuration, skipping unconfigured entries.

        None, empty and whitespace-only entries are dropped; order is
        preserved. An empty result is a valid pool.
        """
        secrets: list[str] = []
        for entry in raw_entries:
            if isinstance(entry, SecretStr):
                entry = entry.get_secret_value()
            if entry is None or not entry.strip():
                continue
            secrets.append(entry.strip())
        return cls(secrets)

    def size(self) -> int:
        return len(self._credentials)

    def __len__(self) -> int:
        return len(self._credentials)

    def __bool__(self) -> bool:
        return bool(self._credentials)

    def __iter__(self) -> Iterator[Credential]:
        return iter(self._credentials)

    def __getitem__(self, index: int) -> Credential:
        return self._credentials[index]

    def __repr__(self) -> str:
        return f"CredentialPool(size={len(self._credentials)})"


def credential_for(
    base: int, retry_offset: int, pool: CredentialPool
) -> Credential | None:
    """Select the credential for one attempt, or None for an empty pool."""
    size = pool.size()
    if size == 0:
        return None
    return pool[(base + retry_offset) % size]


class RotationStrategy(abc.ABC):
    """Hands out the rotation base for each new logical request."""

    @abc.abstractmethod
    def next_base(self, pool_size: int) -> int:
        """Return a base offset in [0, pool_size), or 0 for an empty pool."""
        ...


class CounterRotation(RotationStrategy):
    """Round-robin counter: consecutive requests start on consecutive keys.

    Guarantees an even spread across sequential calls. The
    get-and-increment runs under a lock, so routers shared between
    threads never hand the same base out twice from one state.
    """

    def __init__(self, start: int = 0) -> None:
        self._cursor = start
        self._lock = threading.Lock()

    def next_base(self, pool_size: int) -> int:
        if pool_size <= 0:
            return 0
        with self._lock:
            base = self._cursor % pool_size
            self._cursor = (base + 1) % pool_size
        return base

    def reset(self, start: int = 0) -> None:
        with self._lock:
            self._cursor = start


class TimeBucketRotation(RotationStrategy):
    """Wall-clock windows: every request in one window shares a base.

    Concurrent requests in different windows land on different keys
    without any shared mutable state.
    """

    def __init__(
        self,
        window_seconds: float = 30.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self._window = window_seconds
        self._clock = clock

    def next_base(self, pool_size: int) -> int:
        if pool_size <= 0:
            return 0
        return int(self._clock() // self._window) % pool_size
