"""JWKS fetcher — loads verification keys for a single issuer.

Features:
- TTL-based key cache (default 1 hour)
- Forced refetch on an unknown kid (the issuer rotated its key)
- Rate-limited refetch (at most once per min_refetch_interval)
- Async-safe via asyncio.Lock
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field

import httpx
from jwt import PyJWK

logger = logging.getLogger("credentials_jwt.jwks")


@dataclass
class KeySet:
    """Keys from the last successful fetch, indexed by kid."""

    keys: dict[str, PyJWK] = field(default_factory=dict)
    fetched_at: float = 0.0


class JWKSFetcher:
    """Fetches and caches the public keys published at a JWKS URL.

    Args:
        jwks_url: URL of the JWKS document.
        cache_ttl: How long fetched keys are trusted, in seconds.
        min_refetch_interval: Minimum seconds between fetch attempts.
        http_timeout: HTTP request timeout in seconds.
    """

    def __init__(
        self,
        jwks_url: str,
        *,
        cache_ttl: float = 3600.0,
        min_refetch_interval: float = 30.0,
        http_timeout: float = 10.0,
        _transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._jwks_url = jwks_url
        self._cache_ttl = cache_ttl
        self._min_refetch_interval = min_refetch_interval
        self._http_timeout = http_timeout
        self._transport = _transport
        self._key_set = KeySet()
        self._lock = asyncio.Lock()
        self._last_fetch_attempt: float | None = None

    async def get_key(self, kid: str) -> PyJWK | None:
        """Return the key for ``kid``, refreshing the key set when stale."""
        key = self._key_set.keys.get(kid)
        if key is not None and not self._is_stale():
            return key
        await self._maybe_refresh()
        return self._key_set.keys.get(kid)

    async def get_key_or_refresh(self, kid: str) -> PyJWK | None:
        """Return the key for ``kid``, refetching at once if it is unknown."""
        key = self._key_set.keys.get(kid)
        if key is not None and not self._is_stale():
            return key
        await self._maybe_refresh(force=key is None)
        return self._key_set.keys.get(kid)

    def _is_stale(self) -> bool:
        if self._key_set.fetched_at == 0.0:
            return True
        return (time.monotonic() - self._key_set.fetched_at) > self._cache_ttl

    def _recently_attempted(self, now: float) -> bool:
        if self._last_fetch_attempt is None:
            return False
        return (now - self._last_fetch_attempt) < self._min_refetch_interval

    async def _maybe_refresh(self, *, force: bool = False) -> None:
        if not (force or self._is_stale()) or self._recently_attempted(time.monotonic()):
            return

        async with self._lock:
            now = time.monotonic()
            if self._recently_attempted(now):
                return
            self._last_fetch_attempt = now
            try:
                await self._fetch()
            except Exception:
                logger.exception("Failed to fetch JWKS from %s", self._jwks_url)

    async def _fetch(self) -> None:
        kwargs: dict = {"timeout": self._http_timeout}
        if self._transport is not None:
            kwargs["transport"] = self._transport
        async with httpx.AsyncClient(**kwargs) as client:
            response = await client.get(self._jwks_url)
            response.raise_for_status()
            jwks_data = response.json()

        keys: dict[str, PyJWK] = {}
        for key_data in jwks_data.get("keys", []):
            kid = key_data.get("kid")
            if not kid:
                continue
            try:
                keys[kid] = PyJWK(key_data)
            except Exception:
                logger.warning("Failed to parse JWK with kid=%s", kid)

        self._key_set = KeySet(keys=keys, fetched_at=time.monotonic())
        logger.debug("JWKS refreshed: %d keys loaded", len(keys))
