"""CredentialsJWT — authenticates requests that carry a JWT bearer token.

On first receipt a token is verified, its claims are mapped to a
``UserProfile`` and the profile is cached against the exact token string.
Later requests with the same token reuse the cached profile until the
optional time-to-live runs out, after which the token is verified again.
"""

import asyncio
import enum
import functools
import inspect
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from credentials_jwt.cache import CredentialCache, InMemoryCredentialCache
from credentials_jwt.claims import extract_claims
from credentials_jwt.config import CredentialsJWTConfig
from credentials_jwt.errors import (
    MalformedClaimsError,
    MalformedTokenError,
    MissingSubjectError,
    VerificationError,
)
from credentials_jwt.profile import ProfileHook, UserProfile, build_profile
from credentials_jwt.verifier import TokenVerifier

logger = logging.getLogger("credentials_jwt.authenticator")

BEARER = "Bearer"


class AuthOutcome(enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    PASS = "pass"


@dataclass(frozen=True, slots=True)
class AuthResult:
    """What ``CredentialsJWT.resolve`` observed for one request."""

    outcome: AuthOutcome
    profile: UserProfile | None = None
    status: int | None = None
    detail: dict[str, str] | None = None


async def _call(func: Callable[..., Any], *args: Any) -> Any:
    result = func(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


async def _run_blocking(func: Callable[..., Any], *args: Any) -> Any:
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    # Sync verifiers and hooks may block; keep them off the event loop.
    loop = asyncio.get_running_loop()
    result = await loop.run_in_executor(None, functools.partial(func, *args))
    if inspect.isawaitable(result):
        result = await result
    return result


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    lowered = name.lower()
    for key, candidate in headers.items():
        if key.lower() == lowered:
            return candidate
    return None


def normalize_token(raw: str) -> str:
    """Strip a ``Bearer`` prefix; anything else is taken as the token itself."""
    parts = raw.split(None, 1)
    if len(parts) == 2 and parts[0] == BEARER:
        return parts[1].strip()
    return raw


class CredentialsJWT:
    """JWT bearer token authenticator with a profile cache.

    The request must name this authenticator in the token type header
    (``X-token-type: JWT``) and carry the token in the authorization header,
    either bare or as ``Bearer <token>``. Requests naming another token type
    are passed on untouched so other authenticators can handle them.

    Args:
        verifier: Proves tokens authentic (see ``TokenVerifier``).
        config: Full configuration. When omitted one is built from
            ``subject`` and ``token_time_to_live``.
        subject: Claim used as the profile id and display name.
        token_time_to_live: Seconds a cached profile stays usable. None
            caches until the entry is overwritten or evicted.
        profile_hook: Optional ``(profile, claims)`` callable that adds
            extended properties to freshly built profiles.
        cache: Credential cache. Defaults to an in-memory cache sharing
            this authenticator's clock.
        time_func: Clock (default time.monotonic).
    """

    name = "JWT"
    redirecting = False

    def __init__(
        self,
        verifier: TokenVerifier,
        *,
        config: CredentialsJWTConfig | None = None,
        subject: str | None = None,
        token_time_to_live: float | None = None,
        profile_hook: ProfileHook | None = None,
        cache: CredentialCache | None = None,
        time_func: Callable[[], float] | None = None,
    ) -> None:
        if config is None:
            config = CredentialsJWTConfig(
                token_time_to_live=token_time_to_live,
                **({"subject": subject} if subject is not None else {}),
            )
        elif subject is not None or token_time_to_live is not None:
            raise ValueError("Pass either config or subject/token_time_to_live, not both")

        self._verifier = verifier
        self._config = config
        self._profile_hook = profile_hook
        self._time_func = time_func or time.monotonic
        if cache is None:
            cache = InMemoryCredentialCache(
                max_entries=config.cache_max_entries, time_func=self._time_func,
            )
        self._cache = cache

    @property
    def config(self) -> CredentialsJWTConfig:
        return self._config

    @property
    def cache(self) -> CredentialCache:
        return self._cache

    @property
    def token_time_to_live(self) -> float | None:
        return self._config.token_time_to_live

    @property
    def profile_hook(self) -> ProfileHook | None:
        return self._profile_hook

    def _cached_profile(self, token: str) -> UserProfile | None:
        cached = self._cache.lookup(token)
        if cached is None:
            return None
        ttl = self._config.token_time_to_live
        if ttl is None:
            return cached.profile
        if self._time_func() < cached.created_at + ttl:
            return cached.profile
        # Stale entries stay put; a successful verification overwrites them.
        return None

    async def _profile_from_token(self, token: str) -> UserProfile | None:
        try:
            if await _run_blocking(self._verifier.verify, token) is False:
                raise VerificationError("Verifier rejected token")
        except Exception as e:
            logger.info("JWT can't be verified: %s", e)
            return None

        try:
            claims = extract_claims(token)
        except (MalformedTokenError, MalformedClaimsError) as e:
            logger.error("Couldn't decode claims: %s", e)
            return None

        try:
            profile = build_profile(claims, subject=self._config.subject)
        except MissingSubjectError as e:
            logger.warning("Unable to create user profile: %s", e)
            return None

        if self._profile_hook is not None:
            try:
                await _run_blocking(self._profile_hook, profile, claims)
            except Exception:
                logger.exception("Profile hook failed for subject %s", profile.id)
                return None
        return profile.sealed()

    async def authenticate(
        self,
        headers: Mapping[str, str],
        *,
        on_success: Callable[[UserProfile], Any],
        on_failure: Callable[[int | None, dict[str, str] | None], Any],
        on_pass: Callable[[int | None, dict[str, str] | None], Any],
    ) -> AuthOutcome:
        """Authenticate one request and fire exactly one outcome callback.

        Callbacks may be plain functions or coroutine functions.

        Returns:
            The outcome that was reported.
        """
        if _get_header(headers, self._config.token_type_header) != self.name:
            await _call(on_pass, None, None)
            return AuthOutcome.PASS

        raw_token = _get_header(headers, self._config.authorization_header)
        if raw_token is None:
            logger.debug("Missing %s header", self._config.authorization_header)
            await _call(on_failure, None, None)
            return AuthOutcome.FAILURE

        token = normalize_token(raw_token)

        profile = self._cached_profile(token)
        if profile is None:
            profile = await self._profile_from_token(token)
            if profile is None:
                await _call(on_failure, None, None)
                return AuthOutcome.FAILURE
            self._cache.store(token, profile)

        await _call(on_success, profile)
        return AuthOutcome.SUCCESS

    async def resolve(self, headers: Mapping[str, str]) -> AuthResult:
        """Authenticate a request and return the outcome as a value."""
        captured: dict[str, Any] = {}

        def success(profile: UserProfile) -> None:
            captured["profile"] = profile

        def rejected(status: int | None, detail: dict[str, str] | None) -> None:
            captured["status"] = status
            captured["detail"] = detail

        outcome = await self.authenticate(
            headers, on_success=success, on_failure=rejected, on_pass=rejected,
        )
        return AuthResult(outcome=outcome, **captured)
