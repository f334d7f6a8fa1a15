"""Login, token verification and role-based permission checks."""

import logging
from collections.abc import Iterable

import jwt
from sqlalchemy.orm import Session

from app.core.exceptions import (
    Forbidden,
    InvalidCredentials,
    InvalidToken,
    MissingCredential,
    MissingFields,
    Unauthenticated,
    UnknownUser,
)
from app.core.security import (
    USER_ID_CLAIM,
    create_access_token,
    decode_access_token,
    verify_password,
)
from app.models.user import Role, User
from app.schemas.auth import AuthContext, Identity

logger = logging.getLogger(__name__)


def login(db: Session, email: str | None, password: str | None) -> str:
    """
    Check email and password against the store; return a fresh access token.

    Raises MissingFields if either is absent, InvalidCredentials if the email is
    unknown or the password does not match.
    """
    if not email or not password:
        raise MissingFields()

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        logger.info("Login rejected: unknown email")
        raise InvalidCredentials()
    if not verify_password(password, user.password_hash):
        logger.info("Login rejected: bad password", extra={"user_id": user.id})
        raise InvalidCredentials()

    logger.info("Login succeeded", extra={"user_id": user.id})
    return create_access_token(user.id)


def extract_user_id(token: str) -> str:
    """Decode a bearer token and return its user id. Raises InvalidToken on any failure."""
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        logger.info("Token rejected: %s", type(e).__name__)
        raise InvalidToken() from e
    user_id = payload.get(USER_ID_CLAIM)
    if not user_id or not isinstance(user_id, str):
        raise InvalidToken()
    return user_id


def authenticate(db: Session, token: str | None) -> Identity:
    """
    Verify the token and confirm its user still exists.

    Raises Unauthenticated when no token is given, InvalidToken when it does
    not verify or its user is gone.
    """
    if not token:
        raise Unauthenticated()
    user_id = extract_user_id(token)
    if db.get(User, user_id) is None:
        logger.warning("Token for missing user", extra={"user_id": user_id})
        raise InvalidToken()
    return Identity(user_id=user_id)


def authorize(
    db: Session,
    token: str | None,
    allowed_roles: Iterable[Role],
) -> AuthContext:
    """
    Require the token's user to currently hold one of allowed_roles.

    Raises MissingCredential with no token, InvalidToken if it does not verify,
    UnknownUser if no user matches, Forbidden if the role is not allowed.
    """
    if not token:
        raise MissingCredential()
    user_id = extract_user_id(token)
    user = db.get(User, user_id)
    if user is None:
        raise UnknownUser()
    if user.role not in frozenset(allowed_roles):
        logger.warning(
            "Permission denied",
            extra={"user_id": user.id, "role": user.role.value},
        )
        raise Forbidden()
    return AuthContext(user_id=user.id, role=user.role)
