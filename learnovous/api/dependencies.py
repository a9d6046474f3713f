"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request
from psycopg_pool import ConnectionPool

from learnovous.adapters.repository.postgres import (
    PostgresAccountConfirmationRepository,
    PostgresPhoneNumberRepository,
    PostgresRoleRepository,
    PostgresUserRepository,
)
from learnovous.adapters.smtp.console import ConsoleEmailSender
from learnovous.adapters.smtp.smtp import SmtpEmailSender
from learnovous.config.settings import get_settings
from learnovous.domain.ports import EmailSender
from learnovous.domain.users import UserService

# Module-level singleton - ConsoleEmailSender is stateless
_console_email_sender = ConsoleEmailSender()


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_email_sender() -> EmailSender:
    """Get the email sender selected by the `email_backend` setting."""
    settings = get_settings()
    if settings.email_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            sender=settings.mail_from,
            username=settings.smtp_username,
            password=settings.smtp_password,
            use_tls=settings.smtp_use_tls,
            timeout=settings.smtp_timeout,
        )
    return _console_email_sender


def get_user_service(request: Request) -> UserService:
    """
    Create the user service with injected dependencies.

    Wires the repositories (sharing the app's pool) and the email sender.
    """
    pool = get_pool(request)
    settings = get_settings()
    return UserService(
        user_repository=PostgresUserRepository(pool),
        role_repository=PostgresRoleRepository(pool),
        phone_number_repository=PostgresPhoneNumberRepository(pool),
        account_confirmation_repository=PostgresAccountConfirmationRepository(pool),
        email_sender=get_email_sender(),
        frontend_url=settings.frontend_url,
        app_name=settings.app_name,
        confirmation_expiry_minutes=settings.confirmation_expiry_minutes,
        otp_length=settings.otp_length,
        bcrypt_cost=settings.bcrypt_cost,
    )
