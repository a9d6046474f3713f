"""
Domain layer - Account lifecycle business logic with zero framework imports.

This package contains the registration and account confirmation workflows.
It defines its own port interfaces for infrastructure abstraction, ensuring
true hexagonal architecture decoupling.
"""

from .exceptions import (
    AccountAlreadyVerified,
    AppError,
    EmailAlreadyInUse,
    ExpiredConfirmationUrl,
    InternalError,
    InvalidPhoneNumber,
    InvalidVerificationCodeToken,
    NotFound,
    PasswordTooLong,
)
from .models import AccountConfirmation, PhoneNumber, RegisteredUser, Role, User
from .ports import (
    AccountConfirmationRepository,
    EmailSender,
    PhoneNumberRepository,
    RoleRepository,
    UserRepository,
)
from .users import UserService

__all__ = [
    "AccountAlreadyVerified",
    "AccountConfirmation",
    "AccountConfirmationRepository",
    "AppError",
    "EmailAlreadyInUse",
    "EmailSender",
    "ExpiredConfirmationUrl",
    "InternalError",
    "InvalidPhoneNumber",
    "InvalidVerificationCodeToken",
    "NotFound",
    "PasswordTooLong",
    "PhoneNumber",
    "PhoneNumberRepository",
    "RegisteredUser",
    "Role",
    "RoleRepository",
    "User",
    "UserRepository",
    "UserService",
]
