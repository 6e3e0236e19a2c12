"""base64url codec used for JWT segments (RFC 7515, no padding)."""

import base64
import binascii

from credentials_jwt.errors import DecodeError


def base64url_encode(data: bytes) -> str:
    """Encode bytes as unpadded base64url text."""
    encoded = base64.b64encode(data).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")


def base64url_decode(value: str) -> bytes:
    """Decode unpadded base64url text.

    Raises:
        DecodeError: On characters outside the base64url alphabet or a
            length that no amount of padding can fix.
    """
    if len(value) % 4 == 1:
        raise DecodeError(f"Invalid base64url length: {len(value)}")

    standard = value.replace("-", "+").replace("_", "/")
    standard += "=" * (-len(standard) % 4)
    try:
        return base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"Invalid base64url data: {e}") from e
