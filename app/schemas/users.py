"""Request/response schemas for user endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role


class UserCreateRequest(BaseModel):
    """Registration body. Presence and length are checked by the service, not the parser."""

    name: str | None = Field(default=None)
    email: str | None = Field(default=None)
    password: str | None = Field(default=None)
    username: str | None = Field(default=None)


class UserPublic(BaseModel):
    """User as exposed over the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    email: str
    username: str
    role: Role
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserCreatedResponse(BaseModel):
    """Response for POST /users."""

    message: str = "successful"
    data: list[UserPublic]


class UsersListResponse(BaseModel):
    """Response for GET /allUsers (admin only)."""

    data: list[UserPublic]
