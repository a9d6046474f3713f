"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from learnovous.domain.helpers import BCRYPT_MAX_PASSWORD_BYTES


class RegisterRequest(BaseModel):
    """Request model for user registration."""

    consent: bool
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    password: str = Field(
        ..., min_length=8, description="User password (8 characters to 72 bytes)"
    )
    phone_number: str = Field(
        ...,
        min_length=4,
        max_length=20,
        description="Phone number in international notation, with or without leading '+'",
    )
    username: str = Field(..., min_length=1, max_length=100)
    role: str = Field(..., min_length=1, description="Name of an existing role")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > BCRYPT_MAX_PASSWORD_BYTES:
            raise ValueError(f"password cannot be longer than {BCRYPT_MAX_PASSWORD_BYTES} bytes")
        return value


class RoleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    name: str


class PhoneNumberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    iso_code: str
    international_number: str
    country_code: str


class AccountConfirmationResponse(BaseModel):
    """Confirmation state; token and code are only ever delivered by email."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    status: bool
    expires_at: datetime
    verified_at: datetime | None = None


class RegisterResponse(BaseModel):
    """Response model for successful registration."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    email: str
    username: str
    consent: bool
    timezone: str
    roles: list[RoleResponse]
    account_confirmation: AccountConfirmationResponse
    phone_number: PhoneNumberResponse


class ConfirmationResponse(BaseModel):
    """Response model for successful account confirmation."""

    message: str
    account_confirmation: AccountConfirmationResponse


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
