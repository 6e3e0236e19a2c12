"""FastAPI dependency for credentials-jwt."""

from fastapi import HTTPException, Request

from credentials_jwt.authenticator import AuthOutcome, CredentialsJWT
from credentials_jwt.profile import UserProfile


def create_current_user_dep(*authenticators: CredentialsJWT):
    """Create a FastAPI dependency that authenticates the request.

    Authenticators are tried in order. The first success wins, a failure
    stops the chain, and a pass hands the request to the next one.
    """
    if not authenticators:
        raise ValueError("At least one authenticator is required")

    async def current_user(request: Request) -> UserProfile:
        for authenticator in authenticators:
            result = await authenticator.resolve(request.headers)
            if result.outcome is AuthOutcome.SUCCESS:
                return result.profile
            if result.outcome is AuthOutcome.FAILURE:
                raise HTTPException(
                    status_code=result.status or 401,
                    detail={"error": "authentication_failed", "message": "Invalid credentials"},
                )

        raise HTTPException(
            status_code=401,
            detail={"error": "unsupported_token_type", "message": "No authenticator accepted the request"},
        )

    return current_user
