from collections.abc import Callable

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from forms_api.schemas.auth import Author, Credentials
from forms_api.services.auth import authenticate

security = HTTPBearer(auto_error=False)


async def get_credentials(
    request: Request,
    bearer: HTTPAuthorizationCredentials | None = Depends(security),
) -> Credentials:
    """Authenticate the request's bearer token.

    Rejection reasons are logged by ``authenticate``; the caller only ever
    sees a generic 401.
    """
    result = await authenticate(
        bearer.credentials if bearer else None,
        settings=request.app.state.settings,
        entitlements=request.app.state.entitlement_client,
    )
    if not result.is_valid or result.credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing service token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return result.credentials


def require_scope(scope: str) -> Callable[..., Credentials]:
    """Dependency factory: the caller must hold ``scope``."""

    def _check(credentials: Credentials = Depends(get_credentials)) -> Credentials:
        if scope not in credentials.scope:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing required scope: {scope}",
            )
        return credentials

    return _check


def get_author(credentials: Credentials = Depends(get_credentials)) -> Author:
    return credentials.user
