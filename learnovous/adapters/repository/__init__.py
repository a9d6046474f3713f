"""Repository adapters - Database implementations."""

from .postgres import (
    PostgresAccountConfirmationRepository,
    PostgresPhoneNumberRepository,
    PostgresRoleRepository,
    PostgresUserRepository,
    run_migrations,
)

__all__ = [
    "PostgresAccountConfirmationRepository",
    "PostgresPhoneNumberRepository",
    "PostgresRoleRepository",
    "PostgresUserRepository",
    "run_migrations",
]
