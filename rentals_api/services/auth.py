"""
Authentication service for owner and administrator login, token management and authorization.
Both account kinds receive the same JWT format; the role claim tells them apart.
"""

from typing import Optional, Tuple, Union
from sqlalchemy.ext.asyncio import AsyncSession
from rentals_api.config import settings
from rentals_api.repositories.user import UserRepository
from rentals_api.repositories.owner import OwnerRepository
from rentals_api.models.user import User
from rentals_api.models.owner import Owner
from rentals_api.utils.auth import (
    AccountRole,
    create_access_token,
    create_refresh_token,
    verify_token,
)
from rentals_api.utils.exceptions import (
    InvalidCredentialsError,
    InvalidTokenError,
    TokenExpiredError,
    InactiveAccountError,
    ValidationError,
)
from jose import JWTError
import logging

logger = logging.getLogger(__name__)

Account = Union[User, Owner]


class AuthenticatedAccount:
    """The owner or administrator behind a request."""

    def __init__(self, role: AccountRole, account: Account):
        self.role = role
        self.account = account

    @property
    def id(self) -> str:
        return str(self.account.id)

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    @property
    def is_owner(self) -> bool:
        return self.role == AccountRole.OWNER

    @property
    def name(self) -> str:
        return self.account.name if self.is_admin else self.account.full_name

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.account.email,
            "name": self.name,
            "role": self.role.value,
            "is_active": self.account.is_active,
        }


class AuthService:
    """
    Authentication service for owner and administrator accounts.
    Handles login flows, token issuing and refresh, and resolving the account behind a token.
    """

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.owner_repo = OwnerRepository(db_session)

    @property
    def access_token_ttl_seconds(self) -> int:
        return settings.access_token_expire_minutes * 60

    async def login(self, role: AccountRole, email: str, password: str) -> Tuple[AuthenticatedAccount, str, str]:
        """
        Authenticate an owner or administrator and issue tokens.

        Returns:
            Tuple of (account, access_token, refresh_token)

        Raises:
            InvalidCredentialsError: If credentials are invalid
            InactiveAccountError: If the account is deactivated
        """
        if not email or not email.strip():
            raise ValidationError("Email is required")
        if not password:
            raise ValidationError("Password is required")

        repo = self.user_repo if role == AccountRole.ADMIN else self.owner_repo
        account = await repo.authenticate(email, password)

        if not account:
            logger.warning(f"Failed {role.value} login attempt for email: {email}")
            raise InvalidCredentialsError()

        if not account.is_active:
            logger.warning(f"Login refused for deactivated {role.value}: {email}")
            raise InactiveAccountError()

        authenticated = AuthenticatedAccount(role, account)
        access_token, refresh_token = self.create_tokens(authenticated)

        logger.info(f"{role.value.capitalize()} logged in: {account.email}")
        return authenticated, access_token, refresh_token

    def create_tokens(self, account: AuthenticatedAccount) -> Tuple[str, str]:
        """
        Create access and refresh tokens for an account.

        Returns:
            Tuple of (access_token, refresh_token)
        """
        access_token = create_access_token(
            subject=account.id,
            email=account.account.email,
            role=account.role
        )
        refresh_token = create_refresh_token(
            subject=account.id,
            email=account.account.email,
            role=account.role
        )
        return access_token, refresh_token

    async def refresh_access_token(self, refresh_token: str) -> str:
        """
        Create new access token from refresh token.

        Raises:
            InvalidTokenError: If refresh token is invalid
            TokenExpiredError: If refresh token is expired
            InactiveAccountError: If the account was deactivated since login
        """
        account = await self._resolve_token(refresh_token, token_type="refresh")
        return create_access_token(
            subject=account.id,
            email=account.account.email,
            role=account.role
        )

    async def get_current_account(self, token: str) -> AuthenticatedAccount:
        """
        Get the account behind an access token.

        Raises:
            InvalidTokenError: If token is invalid or the account no longer exists
            TokenExpiredError: If token is expired
            InactiveAccountError: If the account is deactivated
        """
        return await self._resolve_token(token, token_type="access")

    async def _resolve_token(self, token: str, token_type: str) -> AuthenticatedAccount:
        try:
            payload = verify_token(token, token_type=token_type)
        except JWTError as e:
            if "expired" in str(e).lower():
                raise TokenExpiredError()
            raise InvalidTokenError(str(e))

        account = await self._load_account(payload.role, payload.subject)
        if account is None:
            raise InvalidTokenError("Account no longer exists")

        if not account.is_active:
            raise InactiveAccountError()

        return AuthenticatedAccount(payload.role, account)

    async def _load_account(self, role: AccountRole, subject: str) -> Optional[Account]:
        if role == AccountRole.ADMIN:
            try:
                user_id = int(subject)
            except ValueError:
                raise InvalidTokenError("Invalid token subject")
            return await self.user_repo.get_by_id(user_id)

        return await self.owner_repo.get_by_id(subject)
