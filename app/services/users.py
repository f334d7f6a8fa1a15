"""User registration and listing against the credential store."""

import logging
import secrets
import string

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    DuplicateEmail,
    DuplicateUsername,
    FieldTooLong,
    InternalError,
    MissingFields,
)
from app.core.security import hash_password
from app.models.user import USER_ID_LENGTH, Role, User

logger = logging.getLogger(__name__)

USER_ID_ALPHABET = string.ascii_letters + string.digits

# 62^12 candidates; hitting this bound means the RNG or the store is broken.
MAX_USER_ID_ATTEMPTS = 10

# Column widths of the users table, plus the accepted password length.
FIELD_MAX_LENGTHS = {
    "name": 255,
    "email": 320,
    "username": 255,
    "password": 128,
}


def _random_user_id(length: int = USER_ID_LENGTH) -> str:
    return "".join(secrets.choice(USER_ID_ALPHABET) for _ in range(length))


def generate_user_id(db: Session, max_attempts: int = MAX_USER_ID_ATTEMPTS) -> str:
    """
    Return a random 12-character id not used by any existing user.

    Draws a new candidate on every collision and returns the first free one.
    Raises InternalError if no free id is found within max_attempts draws.
    """
    for attempt in range(1, max_attempts + 1):
        candidate = _random_user_id()
        if db.get(User, candidate) is None:
            return candidate
        logger.warning("User id collision on attempt %s; regenerating", attempt)
    raise InternalError("Could not generate a unique user id")


def _email_taken(db: Session, email: str) -> bool:
    return db.query(User).filter(User.email == email).first() is not None


def _username_taken(db: Session, username: str) -> bool:
    return db.query(User).filter(User.username == username).first() is not None


def register_user(
    db: Session,
    name: str | None,
    email: str | None,
    password: str | None,
    username: str | None,
    role: Role = Role.USER,
) -> User:
    """
    Create a user after checking required fields and email/username uniqueness.

    Raises MissingFields, FieldTooLong, DuplicateEmail or DuplicateUsername;
    nothing is persisted in those cases. The password is stored only as a
    bcrypt hash.
    """
    if not name or not email or not password or not username:
        raise MissingFields()
    fields = {"name": name, "email": email, "username": username, "password": password}
    for field, value in fields.items():
        limit = FIELD_MAX_LENGTHS[field]
        if len(value) > limit:
            raise FieldTooLong(f"{field} must be at most {limit} characters")

    if _email_taken(db, email):
        raise DuplicateEmail()
    if _username_taken(db, username):
        raise DuplicateUsername()

    user = User(
        id=generate_user_id(db),
        name=name,
        email=email,
        username=username,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration; report which key clashed.
        db.rollback()
        if _email_taken(db, email):
            raise DuplicateEmail() from e
        if _username_taken(db, username):
            raise DuplicateUsername() from e
        raise
    db.refresh(user)

    logger.info(
        "User registered",
        extra={"user_id": user.id, "role": user.role.value},
    )
    return user


def list_users(db: Session) -> list[User]:
    """Return all users, oldest first."""
    return db.query(User).order_by(User.created_at, User.id).all()
