"""Vulture whitelist — public API that nothing inside the package calls."""

# ---------------------------------------------------------------------------
# Public API on CredentialsJWT / caches (used by consumers, not internally)
# ---------------------------------------------------------------------------
from credentials_jwt.authenticator import CredentialsJWT

CredentialsJWT.redirecting
CredentialsJWT.token_time_to_live
CredentialsJWT.profile_hook

from credentials_jwt.cache import InMemoryCredentialCache

InMemoryCredentialCache.clear

from credentials_jwt.profile import UserProfile

UserProfile.to_dict

# ---------------------------------------------------------------------------
# Dataclass fields (read by callers and serialization)
# ---------------------------------------------------------------------------
_.created_at
_.extended_properties
_.detail
