"""Token verifiers — prove a JWT's signature and required claims.

The authenticator only needs ``verify(token)`` to return normally for a
trustworthy token and raise ``VerificationError`` otherwise. Any object with
that method works; the two classes here cover static keys and JWKS URLs.
"""

import logging
from collections.abc import Awaitable, Sequence
from typing import Any, Protocol, runtime_checkable

import jwt

from credentials_jwt.errors import VerificationError
from credentials_jwt.jwks import JWKSFetcher

logger = logging.getLogger("credentials_jwt.verifier")


@runtime_checkable
class TokenVerifier(Protocol):
    """Anything that can prove a token valid.

    ``verify`` may be a coroutine function or a plain function.
    """

    def verify(self, token: str) -> Awaitable[Any] | Any:
        ...


def _decode(
    token: str,
    key: Any,
    *,
    algorithms: Sequence[str],
    required_claims: Sequence[str],
    issuer: str | None,
    audience: str | Sequence[str] | None,
    leeway: float,
) -> dict[str, Any]:
    try:
        return jwt.decode(
            token,
            key,
            algorithms=list(algorithms),
            issuer=issuer,
            audience=audience,
            leeway=leeway,
            options={"require": list(required_claims)},
        )
    except jwt.ExpiredSignatureError:
        raise VerificationError("Token has expired", "token_expired")
    except jwt.InvalidIssuerError:
        raise VerificationError("Invalid issuer", "token_invalid")
    except jwt.InvalidTokenError as e:
        raise VerificationError(f"Invalid token: {e}", "token_invalid")


class JWTVerifier:
    """Verifies tokens with a single static key.

    Args:
        key: HMAC secret or PEM-encoded public key.
        algorithms: Allowed JWT algorithms.
        required_claims: Claims that must be present in every token.
        issuer: Expected ``iss`` claim (optional).
        audience: Expected ``aud`` claim (optional).
        leeway: Clock skew allowance for ``exp``/``nbf`` in seconds.
    """

    def __init__(
        self,
        key: Any,
        *,
        algorithms: Sequence[str],
        required_claims: Sequence[str] = (),
        issuer: str | None = None,
        audience: str | Sequence[str] | None = None,
        leeway: float = 0,
    ) -> None:
        if not algorithms:
            raise ValueError("At least one algorithm must be allowed")
        self._key = key
        self._algorithms = tuple(algorithms)
        self._required_claims = tuple(required_claims)
        self._issuer = issuer
        self._audience = audience
        self._leeway = leeway

    async def verify(self, token: str) -> dict[str, Any]:
        """Verify a token and return its decoded claims.

        Raises:
            VerificationError: If the signature, expiry, issuer, audience or
                required claims check fails.
        """
        return _decode(
            token,
            self._key,
            algorithms=self._algorithms,
            required_claims=self._required_claims,
            issuer=self._issuer,
            audience=self._audience,
            leeway=self._leeway,
        )


class JWKSVerifier:
    """Verifies tokens with keys published at a JWKS endpoint.

    Args:
        fetcher: The JWKS fetcher used for key lookup by ``kid``.
        algorithms: Allowed JWT algorithms (default ["RS256"]).
        required_claims: Claims that must be present in every token.
        issuer: Expected ``iss`` claim (optional).
        audience: Expected ``aud`` claim (optional).
    """

    def __init__(
        self,
        fetcher: JWKSFetcher,
        *,
        algorithms: Sequence[str] = ("RS256",),
        required_claims: Sequence[str] = (),
        issuer: str | None = None,
        audience: str | Sequence[str] | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._algorithms = tuple(algorithms)
        self._required_claims = tuple(required_claims)
        self._issuer = issuer
        self._audience = audience

    async def verify(self, token: str) -> dict[str, Any]:
        """Verify a token against the JWKS key named in its header.

        Raises:
            VerificationError: If the token is malformed, names no or an
                unknown key, or fails verification.
        """
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError:
            raise VerificationError("Malformed token", "token_invalid")

        kid = header.get("kid")
        if not kid:
            raise VerificationError("Token missing kid header", "token_invalid")

        jwk = await self._fetcher.get_key_or_refresh(kid)
        if jwk is None:
            logger.debug("No JWKS key for kid=%s", kid)
            raise VerificationError("Unknown signing key", "token_invalid")

        return _decode(
            token,
            jwk.key,
            algorithms=self._algorithms,
            required_claims=self._required_claims,
            issuer=self._issuer,
            audience=self._audience,
            leeway=0,
        )
