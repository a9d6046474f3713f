"""
Domain entities - Plain dataclasses shared by ports, adapters and services.
"""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Role:
    """Named role, seeded outside the workflows."""

    id: int
    name: str


@dataclass
class User:
    id: int
    first_name: str
    last_name: str
    email: str
    username: str
    password: str
    consent: bool
    timezone: str
    roles: list[Role] = field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass
class PhoneNumber:
    id: int
    user_id: int
    iso_code: str
    international_number: str
    country_code: str


@dataclass
class AccountConfirmation:
    """
    Email/OTP confirmation issued at registration.

    `user` is only populated by the with-user lookup.
    """

    id: int
    user_id: int
    code: str
    token: str
    status: bool
    expires_at: datetime
    verified_at: datetime | None = None
    user: User | None = None


@dataclass
class RegisteredUser:
    """Result of a successful registration: user fields plus created records."""

    id: int
    first_name: str
    last_name: str
    email: str
    username: str
    consent: bool
    timezone: str
    roles: list[Role]
    account_confirmation: AccountConfirmation
    phone_number: PhoneNumber

    @classmethod
    def from_user(
        cls,
        user: User,
        account_confirmation: AccountConfirmation,
        phone_number: PhoneNumber,
    ) -> "RegisteredUser":
        return cls(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            username=user.username,
            consent=user.consent,
            timezone=user.timezone,
            roles=list(user.roles),
            account_confirmation=account_confirmation,
            phone_number=phone_number,
        )
