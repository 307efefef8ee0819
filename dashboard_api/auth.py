# dashboard_api/auth.py
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional, Protocol

from fastapi import Request, status
from jose import JWTError, jwt

from .config import settings
from .logger import logger


class AuthenticationError(Exception):
    """Rejects a request with a bare status code and no body."""

    def __init__(self, status_code: int):
        super().__init__(status_code)
        self.status_code = status_code


class CredentialProvider(Protocol):
    def verify(self, email: str, password: str) -> bool:
        ...


class StaticCredentialProvider:
    """Accepts exactly one email/password pair, taken from settings."""

    def __init__(self, email: str, password: str):
        self.email = email
        self.password = password

    def verify(self, email: str, password: str) -> bool:
        if not isinstance(email, str) or not isinstance(password, str):
            return False
        email_ok = hmac.compare_digest(email.encode("utf-8"), self.email.encode("utf-8"))
        password_ok = hmac.compare_digest(password.encode("utf-8"), self.password.encode("utf-8"))
        return email_ok and password_ok


def get_credential_provider() -> CredentialProvider:
    return StaticCredentialProvider(settings.ADMIN_EMAIL, settings.ADMIN_PASSWORD)


def create_access_token(email: str, expires_delta: Optional[timedelta] = None) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {"email": email, "exp": datetime.now(timezone.utc) + expires_delta}
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Returns the token claims; raises JWTError if the signature or expiry is bad."""
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


def _extract_bearer_token(header_value: Optional[str]) -> Optional[str]:
    if not header_value:
        return None
    parts = header_value.split()
    if len(parts) < 2:
        return None
    return parts[1]


def authenticate(request: Request) -> dict:
    """
    Dependency guarding every transaction endpoint.

    - no bearer token: 401
    - bad signature or expired token: 403
    - otherwise the claims are attached to ``request.state.user``

    Tokens are never revoked; a token stays usable until it expires.
    """
    token = _extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise AuthenticationError(status.HTTP_401_UNAUTHORIZED)
    try:
        claims = decode_access_token(token)
    except JWTError as e:
        logger.warning(f"Rejected token: {e}")
        raise AuthenticationError(status.HTTP_403_FORBIDDEN)
    request.state.user = claims
    return claims
