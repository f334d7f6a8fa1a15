"""JWT login and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from app.api.v1.payload import body_docs, payload_of
from app.core.database import get_db
from app.core.exceptions import AuthError, InvalidCredentials, MissingFields
from app.models.user import Role
from app.schemas.auth import (
    AccessTokenData,
    AuthContext,
    Identity,
    LoginRequest,
    MessageResponse,
    TokenResponse,
)
from app.services import auth as auth_service

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _auth_http_error(e: AuthError) -> HTTPException:
    return HTTPException(
        status_code=e.status_code,
        detail=e.message,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _bearer_token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    return credentials.credentials if credentials is not None else None


@router.post(
    "/login",
    response_model=TokenResponse,
    openapi_extra=body_docs(LoginRequest),
)
def login(
    body: Annotated[LoginRequest, Depends(payload_of(LoginRequest))],
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email and password; returns a JWT access token valid for 15 minutes.
    Include the token in the Authorization header as: Bearer <AccessToken>
    """
    try:
        token = auth_service.login(db, body.email, body.password)
    except (MissingFields, InvalidCredentials) as e:
        # Missing parameters and bad credentials both answer 401 on login.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
        ) from e
    return TokenResponse(status="OK", data=AccessTokenData(access_token=token))


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
) -> Identity:
    """Dependency: require valid Bearer JWT for an existing user. Raises 401 if missing or invalid."""
    try:
        return auth_service.authenticate(db, _bearer_token(credentials))
    except AuthError as e:
        raise _auth_http_error(e) from e


def require_roles(*allowed_roles: Role) -> Callable[..., AuthContext]:
    """
    Dependency factory: authenticated user whose stored role is in allowed_roles.

    Usage: Depends(require_roles(Role.ADMIN)).
    """
    if not allowed_roles:
        raise ValueError("require_roles needs at least one role")
    roles = frozenset(allowed_roles)

    def dependency(
        _identity: Annotated[Identity, Depends(get_current_user)],
        credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
        db: Annotated[Session, Depends(get_db)],
    ) -> AuthContext:
        try:
            return auth_service.authorize(db, _bearer_token(credentials), roles)
        except AuthError as e:
            raise _auth_http_error(e) from e

    return dependency


@router.get("/check-token", response_model=MessageResponse)
def check_token(
    _identity: Annotated[Identity, Depends(get_current_user)],
) -> MessageResponse:
    """Return 200 when the bearer token is valid and its user still exists."""
    return MessageResponse(message="successful")
