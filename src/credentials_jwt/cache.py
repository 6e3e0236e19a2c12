"""Credential cache — remembers profiles for tokens that already verified.

The cache is a plain key-value store. Staleness is decided by the
authenticator from ``created_at``; the cache never verifies anything and
never expires entries on its own.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable

from credentials_jwt.profile import UserProfile


@dataclass(frozen=True, slots=True)
class CachedCredential:
    """A profile together with the time it was produced."""

    profile: UserProfile
    created_at: float


@runtime_checkable
class CredentialCache(Protocol):
    """Protocol for credential cache backends.

    Implementations must be thread-safe. Last writer wins on ``store``.
    """

    def lookup(self, token: str) -> CachedCredential | None:
        """Return the entry for ``token``, or None if there is none."""
        ...

    def store(self, token: str, profile: UserProfile) -> None:
        """Create or overwrite the entry for ``token``, stamped with now."""
        ...


class InMemoryCredentialCache:
    """Thread-safe in-memory credential cache.

    With ``max_entries`` set, the least recently used entry is evicted once
    the cache is full. Without it the cache grows until the process exits.

    Args:
        max_entries: Optional capacity bound.
        time_func: Clock used to stamp ``created_at`` (default time.monotonic).
    """

    def __init__(
        self,
        max_entries: int | None = None,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        if max_entries is not None and max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self._max_entries = max_entries
        self._time_func = time_func or time.monotonic
        self._entries: OrderedDict[str, CachedCredential] = OrderedDict()
        self._lock = threading.Lock()

    def lookup(self, token: str) -> CachedCredential | None:
        with self._lock:
            entry = self._entries.get(token)
            if entry is not None:
                self._entries.move_to_end(token)
            return entry

    def store(self, token: str, profile: UserProfile) -> None:
        entry = CachedCredential(profile=profile, created_at=self._time_func())
        with self._lock:
            self._entries[token] = entry
            self._entries.move_to_end(token)
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, token: object) -> bool:
        with self._lock:
            return token in self._entries
