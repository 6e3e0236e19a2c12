"""Error taxonomy — every failure the authenticator can recover from."""


class CredentialsError(Exception):
    """Base class for all credential errors."""

    code = "credentials_error"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        if code is not None:
            self.code = code
        super().__init__(message)


class MalformedTokenError(CredentialsError):
    """Raised when a token does not have 2 or 3 dot-separated segments."""

    code = "token_malformed"


class DecodeError(CredentialsError):
    """Raised when a segment is not valid base64url."""

    code = "token_decode"


class MalformedClaimsError(CredentialsError):
    """Raised when the claims segment is not a JSON object."""

    code = "claims_malformed"


class MissingSubjectError(CredentialsError):
    """Raised when the subject claim is absent or not a string."""

    code = "subject_missing"


class VerificationError(CredentialsError):
    """Raised by a verifier when the signature or claims are rejected."""

    code = "token_invalid"
