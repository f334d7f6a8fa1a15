"""User registration and admin listing endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.api.v1.auth import require_roles
from app.api.v1.payload import body_docs, payload_of
from app.core.database import get_db
from app.core.exceptions import ServiceError
from app.models.user import Role
from app.schemas.auth import AuthContext
from app.schemas.users import (
    UserCreatedResponse,
    UserCreateRequest,
    UserPublic,
    UsersListResponse,
)
from app.services.users import list_users, register_user

router = APIRouter()


@router.post(
    "/users",
    response_model=UserCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    openapi_extra=body_docs(UserCreateRequest),
)
def create_user(
    body: Annotated[UserCreateRequest, Depends(payload_of(UserCreateRequest))],
    db: Annotated[Session, Depends(get_db)],
) -> UserCreatedResponse:
    """Register a new user with role USER. Returns the created user without its password."""
    try:
        user = register_user(
            db,
            name=body.name,
            email=body.email,
            password=body.password,
            username=body.username,
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message) from e
    return UserCreatedResponse(data=[UserPublic.model_validate(user)])


@router.get(
    "/allUsers",
    response_model=UsersListResponse,
    status_code=status.HTTP_201_CREATED,
)
def get_all_users(
    _admin: Annotated[AuthContext, Depends(require_roles(Role.ADMIN))],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users (ADMIN only)."""
    users = list_users(db)
    return UsersListResponse(data=[UserPublic.model_validate(u) for u in users])
