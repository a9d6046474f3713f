"""
API v1 routes.

Defines REST endpoints for user registration and account confirmation.
"""

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from learnovous.api.dependencies import get_user_service
from learnovous.api.models import (
    AccountConfirmationResponse,
    ConfirmationResponse,
    ErrorResponse,
    RegisterRequest,
    RegisterResponse,
)
from learnovous.domain.exceptions import AppError
from learnovous.domain.users import UserService

router = APIRouter(tags=["v1"])


def _http_error(exc: AppError) -> HTTPException:
    return HTTPException(status_code=int(exc.status_code), detail=exc.message)


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Role not found"},
        409: {"model": ErrorResponse, "description": "Email already in use"},
        422: {"model": ErrorResponse, "description": "Invalid phone number, password or payload"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
    summary="Register a new user",
    description="Create a user account and email a confirmation link "
    "carrying a one-time token and 6-digit code.",
)
def register(
    request_data: RegisterRequest,
    service: UserService = Depends(get_user_service),
) -> RegisterResponse:
    """
    Register a new user and send the account confirmation email.

    - **phone_number**: international notation, used to resolve the user's timezone
    - **role**: name of an existing role
    """
    try:
        registered = service.register_user(
            consent=request_data.consent,
            email=request_data.email,
            first_name=request_data.first_name,
            last_name=request_data.last_name,
            password=request_data.password,
            phone_number=request_data.phone_number,
            username=request_data.username,
            role=request_data.role,
        )
    except AppError as exc:
        raise _http_error(exc) from None
    return RegisterResponse.model_validate(registered)


@router.put(
    "/confirmation/{token}",
    response_model=ConfirmationResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid, expired or already used link"},
        500: {"model": ErrorResponse, "description": "Unexpected failure"},
    },
    summary="Confirm account",
    description="Verify the account using the token and code from the confirmation email. "
    "An expired confirmation is deleted on first use.",
)
def confirm_account(
    token: str = Path(..., min_length=1),
    code: str = Query(..., min_length=1),
    service: UserService = Depends(get_user_service),
) -> ConfirmationResponse:
    try:
        confirmation = service.confirm_account(token, code)
    except AppError as exc:
        raise _http_error(exc) from None
    return ConfirmationResponse(
        message="Account verified",
        account_confirmation=AccountConfirmationResponse.model_validate(confirmation),
    )
