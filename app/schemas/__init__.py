"""Pydantic request/response schemas."""

from app.schemas.auth import (
    AccessTokenData,
    AuthContext,
    Identity,
    LoginRequest,
    MessageResponse,
    TokenResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.users import (
    UserCreatedResponse,
    UserCreateRequest,
    UserPublic,
    UsersListResponse,
)

__all__ = [
    "AccessTokenData",
    "AuthContext",
    "HealthResponse",
    "Identity",
    "LoginRequest",
    "MessageResponse",
    "TokenResponse",
    "UserCreatedResponse",
    "UserCreateRequest",
    "UserPublic",
    "UsersListResponse",
]
