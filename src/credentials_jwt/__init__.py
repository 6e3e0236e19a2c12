"""credentials-jwt — JWT bearer authentication with a verified-profile cache."""

__version__ = "0.1.0"

from credentials_jwt.authenticator import AuthOutcome, AuthResult, CredentialsJWT
from credentials_jwt.cache import CachedCredential, CredentialCache, InMemoryCredentialCache
from credentials_jwt.config import CredentialsJWTConfig
from credentials_jwt.errors import (
    CredentialsError,
    DecodeError,
    MalformedClaimsError,
    MalformedTokenError,
    MissingSubjectError,
    VerificationError,
)
from credentials_jwt.profile import UserProfile
from credentials_jwt.verifier import JWKSVerifier, JWTVerifier, TokenVerifier

__all__ = [
    "AuthOutcome",
    "AuthResult",
    "CachedCredential",
    "CredentialCache",
    "CredentialsError",
    "CredentialsJWT",
    "CredentialsJWTConfig",
    "DecodeError",
    "InMemoryCredentialCache",
    "JWKSVerifier",
    "JWTVerifier",
    "MalformedClaimsError",
    "MalformedTokenError",
    "MissingSubjectError",
    "TokenVerifier",
    "UserProfile",
    "VerificationError",
]
