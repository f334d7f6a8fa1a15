"""ORM model for application users (credential store and RBAC)."""

import enum

from sqlalchemy import Column, DateTime, Enum, String, func

from app.models.base import Base

USER_ID_LENGTH = 12


class Role(str, enum.Enum):
    """Closed set of permission levels a user can hold."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(Base):
    """
    Registered user for JWT authentication and role-based access control.

    id is a random 12-character alphanumeric string assigned at registration.
    password_hash holds a bcrypt hash; the plain password is never stored.
    """

    __tablename__ = "users"

    id = Column(String(USER_ID_LENGTH), primary_key=True)
    name = Column(String(255), nullable=False)
    email = Column(String(320), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(
        Enum(Role, name="user_role", native_enum=False, length=16),
        nullable=False,
        default=Role.USER,
        server_default=Role.USER.value,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
