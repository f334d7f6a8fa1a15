"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from app.models.user import Role


class LoginRequest(BaseModel):
    """Credentials for login. Fields are optional so absence is reported as missing parameters."""

    email: str | None = Field(default=None, description="Registered email")
    password: str | None = Field(default=None, description="Password")


class AccessTokenData(BaseModel):
    """Wrapper holding the issued token under its public key name."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="AccessToken", description="JWT access token")


class TokenResponse(BaseModel):
    """JWT access token returned after successful login."""

    status: str = Field(default="OK")
    data: AccessTokenData


class Identity(BaseModel):
    """Verified identity attached by the authentication gate."""

    user_id: str


class AuthContext(BaseModel):
    """Identity plus current role, attached by the permission gate."""

    user_id: str
    role: Role


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str
