"""
Authentication utilities for JWT token management and password hashing.
Provides JWT token generation, validation, and account-kind claims for owners and administrators.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any, Union
from jose import JWTError, jwt
from passlib.context import CryptContext
from rentals_api.config import settings
import enum

MIN_PASSWORD_LENGTH = 6

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=12)


class AccountRole(str, enum.Enum):
    """Kind of account a token was issued to."""
    ADMIN = "admin"
    OWNER = "owner"


class TokenPayload:
    """JWT token payload structure."""

    def __init__(self, subject: str, email: str, role: AccountRole, exp: datetime):
        self.subject = subject
        self.email = email
        self.role = role
        self.exp = exp

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenPayload":
        """Create TokenPayload from a decoded claims dictionary."""
        return cls(
            subject=data["sub"],
            email=data["email"],
            role=AccountRole(data["role"]),
            exp=datetime.fromtimestamp(data["exp"], tz=timezone.utc)
        )


def _encode(claims: Dict[str, Any]) -> str:
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def create_access_token(
    subject: Union[str, int],
    email: str,
    role: AccountRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create JWT access token with account claims.

    Args:
        subject: Account id (nanoid for owners, integer for administrators)
        email: Account email address
        role: Account kind (admin/owner)
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))

    return _encode({
        "sub": str(subject),
        "email": email,
        "role": role.value,
        "exp": expire,
        "iat": now,
        "type": "access"
    })


def create_refresh_token(
    subject: Union[str, int],
    email: str,
    role: AccountRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT refresh token."""
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.jwt_refresh_token_expire_days))

    return _encode({
        "sub": str(subject),
        "email": email,
        "role": role.value,
        "exp": expire,
        "iat": now,
        "type": "refresh"
    })


def verify_token(token: str, token_type: str = "access") -> TokenPayload:
    """
    Verify and decode JWT token.

    Args:
        token: JWT token string
        token_type: Expected token type ("access" or "refresh")

    Returns:
        Decoded TokenPayload

    Raises:
        JWTError: If token is invalid, expired or of the wrong type
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm]
        )

        if payload.get("type") != token_type:
            raise JWTError(f"Invalid token type. Expected {token_type}")

        if not payload.get("sub") or not payload.get("email") or not payload.get("role"):
            raise JWTError("Invalid token payload")

        return TokenPayload.from_dict(payload)

    except JWTError:
        raise
    except Exception as e:
        raise JWTError(f"Token validation error: {str(e)}")


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Raises:
        ValueError: If password is too short
    """
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")

    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)
