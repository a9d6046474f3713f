"""
Shared test fixtures and configuration.

This module provides:
- In-memory fakes for the repository and email sender ports
- A fixed clock and a UserService wired to the fakes
- Request payload factories
- A PostgreSQL connection pool for integration tests (skipped when the
  database is unreachable)
"""

from collections.abc import Callable, Generator
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from learnovous.adapters.repository.postgres import run_migrations
from learnovous.config.settings import get_settings
from learnovous.domain.models import AccountConfirmation, PhoneNumber, Role, User
from learnovous.domain.users import UserService

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

VALID_US_PHONE = "+16502530000"


class InMemoryUserRepository:
    """Implements UserRepository with a dict keyed by user id."""

    def __init__(self) -> None:
        self.users: dict[int, User] = {}
        self.create_calls = 0

    def find_by_email(self, email: str) -> User | None:
        return next((u for u in self.users.values() if u.email == email), None)

    def create(self, attributes: dict[str, Any]) -> User:
        self.create_calls += 1
        user = User(id=len(self.users) + 1, **attributes)
        self.users[user.id] = user
        return user

    def add_role(self, user: User, role: Role) -> None:
        user.roles.append(role)
        self.users[user.id] = user


class InMemoryRoleRepository:
    def __init__(self, names: tuple[str, ...] = ("student", "instructor")) -> None:
        self.roles = {name: Role(id=i, name=name) for i, name in enumerate(names, start=1)}

    def find_by_role(self, name: str) -> Role | None:
        return self.roles.get(name)


class InMemoryPhoneNumberRepository:
    def __init__(self) -> None:
        self.phone_numbers: list[PhoneNumber] = []

    def create_phone_number(
        self, iso_code: str, international_number: str, country_code: str, user_id: int
    ) -> PhoneNumber:
        phone_number = PhoneNumber(
            id=len(self.phone_numbers) + 1,
            user_id=user_id,
            iso_code=iso_code,
            international_number=international_number,
            country_code=country_code,
        )
        self.phone_numbers.append(phone_number)
        return phone_number


class InMemoryAccountConfirmationRepository:
    """
    Implements AccountConfirmationRepository; returns copies like a real store.

    Lookups prefer the most recently created match.
    """

    def __init__(self, users: InMemoryUserRepository) -> None:
        self._users = users
        self._next_id = 1
        self.confirmations: dict[int, AccountConfirmation] = {}

    def create_account_confirmation(
        self, code: str, token: str, user_id: int, status: bool, expires_at: datetime
    ) -> AccountConfirmation:
        confirmation = AccountConfirmation(
            id=self._next_id,
            user_id=user_id,
            code=code,
            token=token,
            status=status,
            expires_at=expires_at,
        )
        self._next_id += 1
        self.confirmations[confirmation.id] = confirmation
        return replace(confirmation)

    def find_account_confirmation_with_user(
        self, token: str, code: str
    ) -> AccountConfirmation | None:
        for confirmation in sorted(self.confirmations.values(), key=lambda c: -c.id):
            if confirmation.token == token and confirmation.code == code:
                return replace(confirmation, user=self._users.users.get(confirmation.user_id))
        return None

    def update_account_confirmation(
        self, confirmation_id: int, fields: dict[str, Any]
    ) -> AccountConfirmation:
        updated = replace(self.confirmations[confirmation_id], **fields)
        self.confirmations[confirmation_id] = updated
        return replace(updated)

    def delete_account_confirmation(self, confirmation_id: int) -> None:
        del self.confirmations[confirmation_id]


class RecordingEmailSender:
    """Implements EmailSender; records messages and optionally fails."""

    def __init__(self, error: Exception | None = None) -> None:
        self.sent: list[tuple[list[str], str, str]] = []
        self.error = error

    def send_email(self, to: list[str], subject: str, text: str) -> None:
        if self.error is not None:
            raise self.error
        self.sent.append((to, subject, text))


@pytest.fixture
def users() -> InMemoryUserRepository:
    return InMemoryUserRepository()


@pytest.fixture
def roles() -> InMemoryRoleRepository:
    return InMemoryRoleRepository()


@pytest.fixture
def phone_numbers() -> InMemoryPhoneNumberRepository:
    return InMemoryPhoneNumberRepository()


@pytest.fixture
def confirmations(users: InMemoryUserRepository) -> InMemoryAccountConfirmationRepository:
    return InMemoryAccountConfirmationRepository(users)


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def service(
    users: InMemoryUserRepository,
    roles: InMemoryRoleRepository,
    phone_numbers: InMemoryPhoneNumberRepository,
    confirmations: InMemoryAccountConfirmationRepository,
    email_sender: RecordingEmailSender,
) -> UserService:
    """UserService over in-memory fakes with a fixed clock and cheap bcrypt."""
    return UserService(
        user_repository=users,
        role_repository=roles,
        phone_number_repository=phone_numbers,
        account_confirmation_repository=confirmations,
        email_sender=email_sender,
        frontend_url="https://app.example.com",
        bcrypt_cost=4,
        clock=lambda: NOW,
    )


@pytest.fixture
def registration_data() -> Callable[..., dict[str, Any]]:
    """Factory for register_user keyword arguments."""

    def make(**overrides: Any) -> dict[str, Any]:
        data = {
            "consent": True,
            "email": "ada@example.com",
            "first_name": "Ada",
            "last_name": "Lovelace",
            "password": "secure-password",
            "phone_number": VALID_US_PHONE,
            "username": "ada",
            "role": "student",
        }
        data.update(overrides)
        return data

    return make


@pytest.fixture
def now() -> datetime:
    """The instant the `service` fixture's clock is frozen at."""
    return NOW


@pytest.fixture(scope="session")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for integration tests."""
    settings = get_settings()
    try:
        with psycopg.connect(settings.database_url, connect_timeout=3):
            pass
    except psycopg.OperationalError as exc:
        pytest.skip(f"PostgreSQL not reachable: {exc}")

    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        open=True,
    )
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Remove users and everything hanging off them; roles stay seeded."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM account_confirmations")
        conn.execute("DELETE FROM phone_numbers")
        conn.execute("DELETE FROM user_roles")
        conn.execute("DELETE FROM users")
        conn.commit()
    yield
