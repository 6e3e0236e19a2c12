"""Tests for claims extraction."""

import pytest

from credentials_jwt.claims import extract_claims, split_token
from credentials_jwt.codec import base64url_encode
from credentials_jwt.errors import MalformedClaimsError, MalformedTokenError
from conftest import create_test_token, unsigned_token

pytestmark = pytest.mark.asyncio


class TestSplitToken:
    async def test_signed_token(self):
        assert split_token("a.b.c") == ["a", "b", "c"]

    async def test_unsigned_token(self):
        assert split_token("a.b") == ["a", "b"]

    @pytest.mark.parametrize("token", ["abc", "a.b.c.d", "a.b.c.d.e", ""])
    async def test_wrong_segment_count(self, token):
        with pytest.raises(MalformedTokenError):
            split_token(token)


class TestExtractClaims:
    async def test_signed_token_claims(self):
        token = create_test_token(sub="alice", email="alice@example.com")
        claims = extract_claims(token)
        assert claims["sub"] == "alice"
        assert claims["email"] == "alice@example.com"
        assert isinstance(claims["exp"], int)

    async def test_unsigned_token_claims(self):
        claims = extract_claims(unsigned_token(b'{"sub":"bob","admin":true}'))
        assert claims == {"sub": "bob", "admin": True}

    async def test_non_object_claims(self):
        with pytest.raises(MalformedClaimsError, match="JSON object"):
            extract_claims(unsigned_token(b'["sub","bob"]'))

    async def test_invalid_json(self):
        with pytest.raises(MalformedClaimsError, match="not valid JSON"):
            extract_claims(unsigned_token(b"{not json"))

    async def test_invalid_base64(self):
        header = base64url_encode(b'{"alg":"none"}')
        with pytest.raises(MalformedClaimsError, match="base64url"):
            extract_claims(f"{header}.a$b.sig")

    async def test_four_segments(self):
        with pytest.raises(MalformedTokenError):
            extract_claims(create_test_token() + ".extra")

    async def test_deeply_nested_json(self):
        with pytest.raises(MalformedClaimsError, match="not valid JSON"):
            extract_claims(unsigned_token(b'{"a":' * 100_000 + b"1" + b"}" * 100_000))
