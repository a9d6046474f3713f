"""
User account domain service - registration and account confirmation.

Registration
============

    parse phone -> resolve timezone -> reject known email -> create user
    -> attach role -> create phone number -> issue confirmation -> email

The user row is created before the role lookup, so an unknown role leaves a
user without a role behind. Nothing here is transactional and the
email-existence check is not atomic with the create; both are left to the
store's constraints.

Confirmation
============

    lookup (token, code) -> reject verified -> expire (delete) or verify
    -> email

An expired confirmation is deleted on the first attempt made after its
expiry, so a retry with the same link reports an invalid token.

Email delivery never decides the outcome of either workflow: failures are
logged and dropped once the state change is persisted.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

import bcrypt

from . import helpers
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
from .models import AccountConfirmation, RegisteredUser
from .ports import (
    AccountConfirmationRepository,
    EmailSender,
    PhoneNumberRepository,
    RoleRepository,
    UserRepository,
)

logger = logging.getLogger(__name__)


@dataclass
class UserService:
    """
    Domain service for the user account lifecycle.

    Collaborators are injected so the workflows can run against fakes.
    """

    user_repository: UserRepository
    role_repository: RoleRepository
    phone_number_repository: PhoneNumberRepository
    account_confirmation_repository: AccountConfirmationRepository
    email_sender: EmailSender
    frontend_url: str = "http://localhost:3000"
    app_name: str = "Learnovous"
    confirmation_expiry_minutes: int = 10
    otp_length: int = 6
    bcrypt_cost: int = 10
    clock: Callable[[], datetime] = helpers.current_time

    def register_user(
        self,
        *,
        consent: bool,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        phone_number: str,
        username: str,
        role: str,
    ) -> RegisteredUser:
        """
        Register a new user and send the account confirmation email.

        Returns:
            The created user's fields with its phone number and pending
            account confirmation

        Raises:
            PasswordTooLong: Password longer than 72 bytes once encoded
            InvalidPhoneNumber: Phone number unparseable or without timezone
            EmailAlreadyInUse: A user with this email exists
            NotFound: Role does not exist (the user has already been created)
            InternalError: Any unclassified failure
        """
        try:
            return self._register_user(
                consent=consent,
                email=email,
                first_name=first_name,
                last_name=last_name,
                password=password,
                phone_number=phone_number,
                username=username,
                role=role,
            )
        except AppError as exc:
            logger.warning("Registration rejected for %s: %s", email, exc.message)
            raise
        except Exception:
            logger.exception("Registration failed for %s", email)
            raise InternalError() from None

    def confirm_account(self, token: str, code: str) -> AccountConfirmation:
        """
        Verify an account with the token/code pair from the confirmation email.

        Returns:
            The updated account confirmation (status True, verified_at set)

        Raises:
            InvalidVerificationCodeToken: No confirmation matches the pair
            AccountAlreadyVerified: Confirmation already used
            ExpiredConfirmationUrl: Confirmation window elapsed (record deleted)
            InternalError: Any unclassified failure
        """
        try:
            return self._confirm_account(token, code)
        except AppError as exc:
            logger.warning("Account confirmation rejected: %s", exc.message)
            raise
        except Exception:
            logger.exception("Account confirmation failed")
            raise InternalError() from None

    def _register_user(
        self,
        *,
        consent: bool,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        phone_number: str,
        username: str,
        role: str,
    ) -> RegisteredUser:
        if len(password.encode()) > helpers.BCRYPT_MAX_PASSWORD_BYTES:
            raise PasswordTooLong()

        parsed = helpers.parse_phone_number(phone_number)
        if not parsed.country_code or not parsed.iso_code or not parsed.international_number:
            raise InvalidPhoneNumber()

        timezones = helpers.get_country_timezones(parsed.iso_code)
        if not timezones:
            raise InvalidPhoneNumber()

        if self.user_repository.find_by_email(email) is not None:
            raise EmailAlreadyInUse()

        user = self.user_repository.create(
            {
                "first_name": first_name,
                "last_name": last_name,
                "email": email,
                "password": self._hash_password(password),
                "consent": consent,
                "username": username,
                "timezone": timezones[0],
            }
        )

        user_role = self.role_repository.find_by_role(role)
        if user_role is None:
            raise NotFound("Role")
        self.user_repository.add_role(user, user_role)

        new_phone_number = self.phone_number_repository.create_phone_number(
            iso_code=parsed.iso_code,
            international_number=parsed.international_number,
            country_code=parsed.country_code,
            user_id=user.id,
        )

        code = helpers.generate_otp(self.otp_length)
        token = helpers.generate_token()
        expires_at = helpers.confirmation_expiry(self.confirmation_expiry_minutes, self.clock())

        account_confirmation = self.account_confirmation_repository.create_account_confirmation(
            code=code,
            token=token,
            user_id=user.id,
            status=False,
            expires_at=expires_at,
        )

        confirmation_url = f"{self.frontend_url}/account-confirmation/{token}?code={code}"
        self._send_email(
            [user.email],
            "Account Verification",
            f"Hey {user.full_name}, please click the link below to verify your email "
            f"for the account creation at {self.app_name}.\n\n"
            f"The confirmation link is valid for {self.confirmation_expiry_minutes} minutes "
            "only.\n\n\n"
            f"{confirmation_url}",
        )

        logger.info("Registered user %s (id=%s)", user.email, user.id)
        return RegisteredUser.from_user(user, account_confirmation, new_phone_number)

    def _confirm_account(self, token: str, code: str) -> AccountConfirmation:
        confirmation = self.account_confirmation_repository.find_account_confirmation_with_user(
            token, code
        )
        if confirmation is None or confirmation.user is None:
            raise InvalidVerificationCodeToken()

        if confirmation.status:
            raise AccountAlreadyVerified()

        now = self.clock()
        if confirmation.expires_at < now:
            self.account_confirmation_repository.delete_account_confirmation(confirmation.id)
            raise ExpiredConfirmationUrl()

        verified = self.account_confirmation_repository.update_account_confirmation(
            confirmation.id, {"status": True, "verified_at": now}
        )

        user = confirmation.user
        self._send_email(
            [user.email],
            "Account Verified Successfully",
            f"Hey {user.username}, your account has been successfully verified.",
        )

        logger.info("Verified account for user id=%s", user.id)
        return verified

    def _send_email(self, to: list[str], subject: str, text: str) -> None:
        """Send an email, logging and dropping any delivery failure."""
        try:
            self.email_sender.send_email(to, subject, text)
        except Exception:
            logger.exception("Email delivery failed: subject=%r to=%s", subject, to)

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt with the configured cost factor."""
        return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=self.bcrypt_cost)).decode()
