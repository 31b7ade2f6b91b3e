"""
Authentication API endpoints for owner registration, owner and administrator login,
token refresh and the current account.
"""

from fastapi import APIRouter, Depends, status
from rentals_api.config import settings
from rentals_api.services.auth import AuthService, AuthenticatedAccount
from rentals_api.services.owner import OwnerService
from rentals_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    RefreshTokenRequest,
    AccessTokenResponse,
    AccountResponse
)
from rentals_api.schemas.owner import OwnerRegister
from rentals_api.schemas.error import error_responses
from rentals_api.utils.auth import AccountRole
from rentals_api.utils.dependencies import (
    get_auth_service,
    get_owner_service,
    get_current_account
)
from rentals_api.utils.exceptions import (
    APIException,
    InvalidCredentialsError,
    InvalidTokenError
)


router = APIRouter(prefix="/auth", tags=["Authentication"])


async def _login(role: AccountRole, login_data: LoginRequest, auth_service: AuthService) -> LoginResponse:
    try:
        account, access_token, refresh_token = await auth_service.login(
            role,
            email=login_data.email,
            password=login_data.password
        )
    except APIException:
        raise
    except Exception:
        raise InvalidCredentialsError()

    return LoginResponse(
        account=AccountResponse.model_validate(account.to_dict()),
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=auth_service.access_token_ttl_seconds
    )


@router.post(
    "/admin/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Administrator login",
    description="Authenticate an administrator with email and password, returns JWT tokens",
    responses=error_responses(401, 422)
)
async def admin_login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Authenticate an administrator and return JWT tokens.

    Raises:
        InvalidCredentialsError: If credentials are invalid
        InactiveAccountError: If the account is deactivated
    """
    return await _login(AccountRole.ADMIN, login_data, auth_service)


@router.post(
    "/owners/register",
    response_model=LoginResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register owner",
    description="Create an owner account and sign it in",
    responses=error_responses(409, 422)
)
async def register_owner(
    owner_data: OwnerRegister,
    owner_service: OwnerService = Depends(get_owner_service),
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    """
    Register a new owner and return tokens for it.

    Raises:
        DuplicateResourceError: If the email is already registered
    """
    owner = await owner_service.register(owner_data)
    account = AuthenticatedAccount(AccountRole.OWNER, owner)
    access_token, refresh_token = auth_service.create_tokens(account)

    return LoginResponse(
        account=AccountResponse.model_validate(account.to_dict()),
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        expires_in=auth_service.access_token_ttl_seconds
    )


@router.post(
    "/owners/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Owner login",
    description="Authenticate an owner with email and password, returns JWT tokens",
    responses=error_responses(401, 422)
)
async def owner_login(
    login_data: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> LoginResponse:
    return await _login(AccountRole.OWNER, login_data, auth_service)


@router.post(
    "/refresh",
    response_model=AccessTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Refresh access token",
    description="Generate new access token using refresh token",
    responses=error_responses(401, 422)
)
async def refresh_token(
    refresh_data: RefreshTokenRequest,
    auth_service: AuthService = Depends(get_auth_service)
) -> AccessTokenResponse:
    """
    Create new access token from refresh token.

    Raises:
        InvalidTokenError: If refresh token is invalid
        TokenExpiredError: If refresh token is expired
        InactiveAccountError: If the account was deactivated
    """
    try:
        access_token = await auth_service.refresh_access_token(refresh_data.refresh_token)
    except APIException:
        raise
    except Exception:
        raise InvalidTokenError("Failed to refresh token")

    return AccessTokenResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60
    )


@router.get(
    "/me",
    response_model=AccountResponse,
    status_code=status.HTTP_200_OK,
    summary="Get current account",
    description="Owner or administrator behind the bearer token",
    responses=error_responses(401)
)
async def get_current_account_info(
    account: AuthenticatedAccount = Depends(get_current_account)
) -> AccountResponse:
    return AccountResponse.model_validate(account.to_dict())
