"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the account workflows
require from infrastructure. Adapters implement these protocols.
"""

from datetime import datetime
from typing import Any, Protocol

from .models import AccountConfirmation, PhoneNumber, Role, User


class UserRepository(Protocol):
    """Port interface for user persistence."""

    def find_by_email(self, email: str) -> User | None:
        """Return the user registered with this email, if any."""
        ...

    def create(self, attributes: dict[str, Any]) -> User:
        """
        Persist a new user.

        Args:
            attributes: first_name, last_name, email, username, password
                (already hashed), consent, timezone

        Returns:
            The created user with its generated id
        """
        ...

    def add_role(self, user: User, role: Role) -> None:
        """Attach a role to the user, appending it to `user.roles`."""
        ...


class RoleRepository(Protocol):
    """Port interface for role lookup."""

    def find_by_role(self, name: str) -> Role | None:
        """Return the role with this name, if seeded."""
        ...


class PhoneNumberRepository(Protocol):
    """Port interface for phone number persistence."""

    def create_phone_number(
        self, iso_code: str, international_number: str, country_code: str, user_id: int
    ) -> PhoneNumber:
        ...


class AccountConfirmationRepository(Protocol):
    """Port interface for account confirmation persistence."""

    def create_account_confirmation(
        self, code: str, token: str, user_id: int, status: bool, expires_at: datetime
    ) -> AccountConfirmation:
        ...

    def find_account_confirmation_with_user(
        self, token: str, code: str
    ) -> AccountConfirmation | None:
        """
        Look up a confirmation by its token/code pair, joined with its owner.

        Uniqueness is not enforced by the store; when several rows match,
        the most recently created one is returned.
        """
        ...

    def update_account_confirmation(
        self, confirmation_id: int, fields: dict[str, Any]
    ) -> AccountConfirmation:
        ...

    def delete_account_confirmation(self, confirmation_id: int) -> None:
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_email(self, to: list[str], subject: str, text: str) -> None:
        """
        Deliver a plain-text email.

        May raise on transport failure; callers decide whether that matters.
        """
        ...
