"""Password hashing, session tokens, and request authentication/authorization helpers."""

import hashlib
import hmac
import logging
import secrets
from datetime import datetime, timezone
from typing import Optional

import bcrypt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.db.session import get_db

logger = logging.getLogger("backoffice")

# Optional bearer scheme; the session cookie is the primary transport
security_scheme = HTTPBearer(auto_error=False)

SALT_BYTES = 16
KEY_BYTES = 32


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how DateTime columns are stored."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _derive_key(password: str, salt: bytes, key_bytes: int = KEY_BYTES) -> bytes:
    # Changing PASSWORD_KDF_ROUNDS invalidates every stored hash.
    return bcrypt.kdf(
        password=password.encode("utf-8"),
        salt=salt,
        desired_key_bytes=key_bytes,
        rounds=settings.PASSWORD_KDF_ROUNDS,
    )


def hash_password(password: str) -> str:
    """Hash a password with bcrypt-pbkdf and a fresh salt.

    Returns ``"<hex key>.<hex salt>"``.
    """
    salt = secrets.token_bytes(SALT_BYTES)
    key = _derive_key(password, salt)
    return f"{key.hex()}.{salt.hex()}"


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a password against a stored ``hash.salt`` value."""
    try:
        key_hex, salt_hex = password_hash.split(".")
        expected = bytes.fromhex(key_hex)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    if not plain_password or not expected or not salt or len(expected) > 512:
        return False
    candidate = _derive_key(plain_password, salt, len(expected))
    return hmac.compare_digest(candidate, expected)


def generate_session_token() -> str:
    """Create an opaque session token."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """SHA-256 of a session token; only the hash is persisted."""
    return hashlib.sha256(token.encode()).hexdigest()


def extract_session_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    """Read the session token from the cookie, falling back to a Bearer header."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token
    if credentials is not None:
        return credentials.credentials
    return None


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    db: Session = Depends(get_db),
) -> str:
    """Resolve the user bound to the request's session token."""
    from backoffice.services.auth_service import auth_service

    token = extract_session_token(request, credentials)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user_id = auth_service.current_user(db, token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired session",
        )
    return user_id


class RequirePermission:
    """Dependency that checks the session user holds a named permission.

    The session gate runs first, so a request without a session is
    rejected with 401 before any permission lookup happens.
    """

    def __init__(self, permission: str):
        self.permission = permission

    def __call__(
        self,
        user_id: str = Depends(get_current_user_id),
        db: Session = Depends(get_db),
    ) -> str:
        from backoffice.services.authorization_service import authorization_service

        if not authorization_service.has_permission(db, user_id, self.permission):
            logger.warning(
                "Permission denied: user=%s permission=%s", user_id, self.permission
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user_id


# Convenience dependency factories
require_view_forms = RequirePermission("view_forms")
require_manage_users = RequirePermission("manage_users")
require_manage_roles = RequirePermission("manage_roles")
