"""
PostgreSQL repository adapters - Implement the account persistence ports.

This module provides the PostgreSQL implementations of the domain's
repository ports using psycopg3 with raw SQL.

No method here coordinates with another: the registration workflow issues
its creates as separate statements, each committed on its own. The only
guard against duplicate registrations racing past the email check is the
UNIQUE constraint on users.email, which surfaces as a psycopg error.
"""

import logging
from pathlib import Path
from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from learnovous.domain.models import AccountConfirmation, PhoneNumber, Role, User

logger = logging.getLogger(__name__)

_USER_COLUMNS = "id, first_name, last_name, email, username, password, consent, timezone"

# Columns update_account_confirmation is allowed to touch
_CONFIRMATION_UPDATABLE = frozenset({"code", "token", "status", "expires_at", "verified_at"})


def _fetch_roles(cursor: Any, user_id: int) -> list[Role]:
    cursor.execute(
        """
        SELECT r.id, r.name
        FROM roles r
        JOIN user_roles ur ON ur.role_id = r.id
        WHERE ur.user_id = %s
        ORDER BY r.id
        """,
        (user_id,),
    )
    return [Role(id=row["id"], name=row["name"]) for row in cursor.fetchall()]


def _user_from_row(row: dict[str, Any], roles: list[Role] | None = None) -> User:
    return User(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        username=row["username"],
        password=row["password"],
        consent=row["consent"],
        timezone=row["timezone"],
        roles=roles or [],
    )


def _confirmation_from_row(row: dict[str, Any], user: User | None = None) -> AccountConfirmation:
    return AccountConfirmation(
        id=row["id"],
        user_id=row["user_id"],
        code=row["code"],
        token=row["token"],
        status=row["status"],
        expires_at=row["expires_at"],
        verified_at=row["verified_at"],
        user=user,
    )


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def find_by_email(self, email: str) -> User | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email = %s", (email,))
            row = cursor.fetchone()
            if row is None:
                return None
            return _user_from_row(row, _fetch_roles(cursor, row["id"]))

    def create(self, attributes: dict[str, Any]) -> User:
        """
        Insert a user row.

        Raises psycopg.errors.UniqueViolation if the email was registered
        after the caller's existence check.
        """
        insert_sql = f"""
            INSERT INTO users (first_name, last_name, email, username, password, consent, timezone)
            VALUES (%(first_name)s, %(last_name)s, %(email)s, %(username)s,
                    %(password)s, %(consent)s, %(timezone)s)
            RETURNING {_USER_COLUMNS}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(insert_sql, attributes)
            row = cursor.fetchone()
            conn.commit()
            return _user_from_row(row)

    def add_role(self, user: User, role: Role) -> None:
        with self._pool.connection() as conn:
            conn.execute(
                """
                INSERT INTO user_roles (user_id, role_id)
                VALUES (%s, %s)
                ON CONFLICT DO NOTHING
                """,
                (user.id, role.id),
            )
            conn.commit()
        if all(existing.id != role.id for existing in user.roles):
            user.roles.append(role)


class PostgresRoleRepository:
    """Implements RoleRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def find_by_role(self, name: str) -> Role | None:
        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute("SELECT id, name FROM roles WHERE name = %s", (name,))
            row = cursor.fetchone()
            return Role(id=row["id"], name=row["name"]) if row else None


class PostgresPhoneNumberRepository:
    """Implements PhoneNumberRepository protocol via psycopg3."""

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_phone_number(
        self, iso_code: str, international_number: str, country_code: str, user_id: int
    ) -> PhoneNumber:
        insert_sql = """
            INSERT INTO phone_numbers (user_id, iso_code, international_number, country_code)
            VALUES (%s, %s, %s, %s)
            RETURNING id, user_id, iso_code, international_number, country_code
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(insert_sql, (user_id, iso_code, international_number, country_code))
            row = cursor.fetchone()
            conn.commit()
            return PhoneNumber(**row)


class PostgresAccountConfirmationRepository:
    """Implements AccountConfirmationRepository protocol via psycopg3."""

    _RETURNING = "RETURNING id, user_id, code, token, status, expires_at, verified_at"

    def __init__(self, pool: ConnectionPool) -> None:
        self._pool = pool

    def create_account_confirmation(
        self, code: str, token: str, user_id: int, status: bool, expires_at: Any
    ) -> AccountConfirmation:
        insert_sql = f"""
            INSERT INTO account_confirmations (user_id, code, token, status, expires_at)
            VALUES (%s, %s, %s, %s, %s)
            {self._RETURNING}
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(insert_sql, (user_id, code, token, status, expires_at))
            row = cursor.fetchone()
            conn.commit()
            return _confirmation_from_row(row)

    def find_account_confirmation_with_user(
        self, token: str, code: str
    ) -> AccountConfirmation | None:
        """
        Fetch the newest confirmation matching (token, code) with its owner.

        The owner is LEFT JOINed so a dangling row yields `user=None`.
        """
        select_sql = """
            SELECT ac.id, ac.user_id, ac.code, ac.token, ac.status,
                   ac.expires_at, ac.verified_at,
                   u.id AS owner_id, u.first_name, u.last_name, u.email,
                   u.username, u.password, u.consent, u.timezone
            FROM account_confirmations ac
            LEFT JOIN users u ON u.id = ac.user_id
            WHERE ac.token = %s AND ac.code = %s
            ORDER BY ac.created_at DESC, ac.id DESC
            LIMIT 1
        """

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(select_sql, (token, code))
            row = cursor.fetchone()
            if row is None:
                return None

            user = None
            if row["owner_id"] is not None:
                user = _user_from_row(
                    {**row, "id": row["owner_id"]}, _fetch_roles(cursor, row["owner_id"])
                )
            return _confirmation_from_row(row, user)

    def update_account_confirmation(
        self, confirmation_id: int, fields: dict[str, Any]
    ) -> AccountConfirmation:
        unknown = set(fields) - _CONFIRMATION_UPDATABLE
        if unknown:
            raise ValueError(f"Cannot update account confirmation fields: {sorted(unknown)}")
        if not fields:
            raise ValueError("No account confirmation fields to update")

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = {}").format(sql.Identifier(name), sql.Placeholder(name))
            for name in fields
        )
        update_sql = sql.SQL("UPDATE account_confirmations SET {} WHERE id = {} {}").format(
            assignments, sql.Placeholder("confirmation_id"), sql.SQL(self._RETURNING)
        )

        with self._pool.connection() as conn, conn.cursor(row_factory=dict_row) as cursor:
            cursor.execute(update_sql, {**fields, "confirmation_id": confirmation_id})
            row = cursor.fetchone()
            conn.commit()
            if row is None:
                raise LookupError(f"Account confirmation {confirmation_id} not found")
            return _confirmation_from_row(row)

    def delete_account_confirmation(self, confirmation_id: int) -> None:
        with self._pool.connection() as conn:
            conn.execute("DELETE FROM account_confirmations WHERE id = %s", (confirmation_id,))
            conn.commit()


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: learnovous/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning("Migrations directory not found: %s", migrations_dir)
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info("Running %d migration(s)", len(sql_files))

    for sql_file in sql_files:
        logger.info("Executing migration: %s", sql_file.name)
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info("Migration complete: %s", sql_file.name)
        except Exception as e:
            logger.error("Migration failed: %s - %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
