"""
Domain exceptions - Semantic error types for the account workflows.

Every error a workflow surfaces to its caller is an AppError carrying a
human-readable message and an HTTP-style status code. The HTTP layer maps
these to responses; the domain itself never imports a web framework.
"""

from http import HTTPStatus


class AppError(Exception):
    """Base class for classified application errors."""

    message = "Something went wrong"
    status_code = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidPhoneNumber(AppError):
    """Phone number could not be parsed or has no known timezone."""

    message = "Invalid phone number"
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class PasswordTooLong(AppError):
    """Password exceeds what bcrypt can hash (72 bytes once UTF-8 encoded)."""

    message = "Password cannot be longer than 72 bytes"
    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class EmailAlreadyInUse(AppError):
    """A user with this email already exists."""

    message = "Email already in use"
    status_code = HTTPStatus.CONFLICT


class NotFound(AppError):
    """A referenced entity does not exist."""

    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, entity: str) -> None:
        self.entity = entity
        super().__init__(f"{entity} not found")


class InvalidVerificationCodeToken(AppError):
    """No account confirmation matches the token/code pair."""

    message = "Invalid account confirmation token or code"
    status_code = HTTPStatus.BAD_REQUEST


class AccountAlreadyVerified(AppError):
    """The account confirmation has already been used."""

    message = "Account already verified"
    status_code = HTTPStatus.BAD_REQUEST


class ExpiredConfirmationUrl(AppError):
    """The confirmation window elapsed; the record has been deleted."""

    message = "Account confirmation url has expired"
    status_code = HTTPStatus.BAD_REQUEST


class InternalError(AppError):
    """Catch-all for unclassified failures."""

    pass
