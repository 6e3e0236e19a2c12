"""Claims extraction — reads the payload segment without verifying it.

The verifier has already proven the token authentic by the time this runs;
extraction only needs the generic claims map to pull out the subject and
any extra fields for the profile hook.
"""

import json
from typing import Any

from credentials_jwt.codec import base64url_decode
from credentials_jwt.errors import DecodeError, MalformedClaimsError, MalformedTokenError


def split_token(token: str) -> list[str]:
    """Split a token into its segments.

    Unsigned tokens have two segments, signed tokens three.

    Raises:
        MalformedTokenError: For any other segment count.
    """
    segments = token.split(".")
    if len(segments) not in (2, 3):
        raise MalformedTokenError(
            f"Expected 2 or 3 token segments, got {len(segments)}"
        )
    return segments


def extract_claims(token: str) -> dict[str, Any]:
    """Decode the claims segment of a token into a dict.

    Raises:
        MalformedTokenError: If the token has the wrong number of segments.
        MalformedClaimsError: If the payload is not base64url-encoded JSON
            describing an object.
    """
    segments = split_token(token)

    try:
        raw = base64url_decode(segments[1])
    except DecodeError as e:
        raise MalformedClaimsError(f"Claims segment is not base64url: {e.message}") from e

    try:
        claims = json.loads(raw)
    except (ValueError, RecursionError) as e:
        raise MalformedClaimsError(f"Claims segment is not valid JSON: {e}") from e

    if not isinstance(claims, dict):
        raise MalformedClaimsError(
            f"Claims must be a JSON object, got {type(claims).__name__}"
        )
    return claims
