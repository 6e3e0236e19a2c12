"""User profile and the claims-to-profile mapping."""

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from credentials_jwt.errors import MissingSubjectError

PROVIDER = "JWT"
DEFAULT_SUBJECT = "sub"


@dataclass(frozen=True, slots=True)
class UserProfile:
    """The identity of an authenticated bearer.

    ``id``, ``display_name`` and ``provider`` are fixed at construction.
    Extra claims copied in by a profile hook live in ``extended_properties``,
    which becomes read-only once the authenticator caches the profile.
    """

    id: str
    display_name: str
    provider: str = PROVIDER
    extended_properties: Mapping[str, Any] = field(default_factory=dict)

    def sealed(self) -> "UserProfile":
        """Return a copy whose extended properties are read-only."""
        return replace(
            self, extended_properties=MappingProxyType(dict(self.extended_properties)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "provider": self.provider,
            "extended_properties": dict(self.extended_properties),
        }


ProfileHook = Callable[[UserProfile, dict[str, Any]], Awaitable[None] | None]
"""Optional callable ``(profile, claims)`` that adds extended properties."""


def build_profile(claims: dict[str, Any], *, subject: str = DEFAULT_SUBJECT) -> UserProfile:
    """Build a profile whose id and display name are the subject claim.

    Raises:
        MissingSubjectError: If ``claims[subject]`` is missing or not a string.
    """
    user_id = claims.get(subject)
    if not isinstance(user_id, str):
        raise MissingSubjectError(f"JWT claims do not contain '{subject}'")
    return UserProfile(id=user_id, display_name=user_id, provider=PROVIDER)
