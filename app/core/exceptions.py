"""Error taxonomy shared by the auth and user services.

Each error carries a client-facing message and the HTTP status the API layer
answers with. Routes and dependencies translate them into HTTPException.
"""


class ServiceError(Exception):
    """Base class for expected, client-reportable failures."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class AuthError(ServiceError):
    """Authentication/authorization failure; short-circuits before handler logic."""

    status_code = 401


# Validation errors


class MissingFields(ServiceError):
    default_message = "Missing parameters"


class FieldTooLong(ServiceError):
    default_message = "Field too long"


class DuplicateEmail(ServiceError):
    default_message = "This email has already been registered"


class DuplicateUsername(ServiceError):
    default_message = "Username already taken"


# Authentication / authorization errors


class InvalidCredentials(AuthError):
    default_message = "Invalid email or password"


class Unauthenticated(AuthError):
    default_message = "Unauthorized"


class InvalidToken(AuthError):
    default_message = "This Token is Invalid"


class Forbidden(AuthError):
    """Authenticated, but the stored role is not in the route's allowed set."""

    default_message = "You are not authorized to perform this action"


class UnknownUser(AuthError):
    status_code = 400
    default_message = "This user is invalid or does not exist"


class MissingCredential(AuthError):
    """The permission gate ran without any credential on the request."""

    default_message = "Authenticate system was ignored"


class InternalError(ServiceError):
    status_code = 500
    default_message = "Internal server error"
