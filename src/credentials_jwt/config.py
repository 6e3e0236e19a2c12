"""Authenticator configuration."""

from dataclasses import dataclass

from credentials_jwt.profile import DEFAULT_SUBJECT

TOKEN_TYPE_HEADER = "X-token-type"
AUTHORIZATION_HEADER = "Authorization"


@dataclass(frozen=True, slots=True)
class CredentialsJWTConfig:
    """Settings fixed when a CredentialsJWT authenticator is built.

    Example:
        CredentialsJWTConfig()                           # cache forever, "sub"
        CredentialsJWTConfig(token_time_to_live=300)     # re-verify every 5 min
        CredentialsJWTConfig(subject="email")            # identity from email
    """

    subject: str = DEFAULT_SUBJECT
    token_time_to_live: float | None = None
    token_type_header: str = TOKEN_TYPE_HEADER
    authorization_header: str = AUTHORIZATION_HEADER
    cache_max_entries: int | None = None

    def __post_init__(self) -> None:
        """Validate settings at construction time."""
        if not self.subject:
            raise ValueError("subject claim name must not be empty")
        if self.token_time_to_live is not None and self.token_time_to_live <= 0:
            raise ValueError(
                f"token_time_to_live must be positive, got {self.token_time_to_live}"
            )
        if self.cache_max_entries is not None and self.cache_max_entries <= 0:
            raise ValueError(
                f"cache_max_entries must be positive, got {self.cache_max_entries}"
            )
        for field_name in ("token_type_header", "authorization_header"):
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} must not be empty")
