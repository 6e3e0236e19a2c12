"""Test fixtures for credentials-jwt tests.

Tests generate RSA keys, sign JWTs with PyJWT, and mock JWKS responses
using httpx MockTransport. Time is driven by a mutable ``clock`` list.
"""

import asyncio
import base64
import uuid
from datetime import UTC, datetime, timedelta

import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from credentials_jwt.codec import base64url_encode
from credentials_jwt.errors import VerificationError

pytestmark = pytest.mark.asyncio

HMAC_SECRET = "test-secret-that-is-long-enough-for-hs256"


@pytest.fixture
def rsa_key_pair():
    """Generate a test RSA key pair."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture
def test_kid():
    return f"test-key-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def jwks_response(rsa_key_pair, test_kid):
    """A JWKS response body holding the test public key."""
    from cryptography.hazmat.primitives.serialization import load_pem_public_key

    _, public_pem = rsa_key_pair
    numbers = load_pem_public_key(public_pem.encode("utf-8")).public_numbers()

    def _int_to_b64url(value: int) -> str:
        value_bytes = value.to_bytes((value.bit_length() + 7) // 8, byteorder="big")
        return base64.urlsafe_b64encode(value_bytes).rstrip(b"=").decode("ascii")

    return {
        "keys": [
            {
                "kty": "RSA",
                "kid": test_kid,
                "use": "sig",
                "alg": "RS256",
                "n": _int_to_b64url(numbers.n),
                "e": _int_to_b64url(numbers.e),
            }
        ]
    }


@pytest.fixture
def clock():
    return [1000.0]


def create_test_token(
    key: str = HMAC_SECRET,
    *,
    algorithm: str = "HS256",
    kid: str | None = None,
    sub: str | None = "alice",
    expires_in: int = 900,
    **claims,
) -> str:
    """Create a signed test JWT. Pass ``sub=None`` to leave the subject out."""
    now = datetime.now(UTC)
    payload = {"iat": now, "exp": now + timedelta(seconds=expires_in), **claims}
    if sub is not None:
        payload["sub"] = sub
    headers = {"kid": kid} if kid else None
    return jwt.encode(payload, key, algorithm=algorithm, headers=headers)


def unsigned_token(claims_segment: bytes) -> str:
    """Build a two-segment token around a raw claims segment."""
    header = base64url_encode(b'{"alg":"none","typ":"JWT"}')
    return f"{header}.{base64url_encode(claims_segment)}"


class StubVerifier:
    """Verifier double: accepts everything until told to fail."""

    def __init__(self, *, fail: bool = False, delay: float = 0.0):
        self.fail = fail
        self.delay = delay
        self.calls: list[str] = []

    async def verify(self, token: str) -> None:
        self.calls.append(token)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise VerificationError("stub rejection")


def jwt_headers(token: str | None, *, token_type: str | None = "JWT", bearer: bool = True) -> dict:
    headers = {}
    if token_type is not None:
        headers["X-token-type"] = token_type
    if token is not None:
        headers["Authorization"] = f"Bearer {token}" if bearer else token
    return headers
