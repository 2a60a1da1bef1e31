"""Auth service — credential verification, session login/logout, user provisioning."""

import logging
from datetime import timedelta
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from backoffice.core.config import settings
from backoffice.core.exceptions import (
    AuthenticationError, ResourceNotFoundError, ValidationError,
)
from backoffice.core.security import (
    hash_password, verify_password, generate_session_token, hash_token, utcnow,
)
from backoffice.models.role import Role
from backoffice.models.user import User, UserSession

logger = logging.getLogger("backoffice")

_dummy_hash: Optional[str] = None


def _get_dummy_hash() -> str:
    """Hash verified against when the username is unknown, to even out timing."""
    global _dummy_hash
    if _dummy_hash is None:
        _dummy_hash = hash_password("not-a-real-password")
    return _dummy_hash


class AuthService:
    """Handles credential checks, sessions, and user provisioning."""

    @staticmethod
    def verify(db: Session, username: str, password: str) -> User:
        """Check a username/password pair.

        Unknown usernames and wrong passwords raise the same error.

        Raises:
            AuthenticationError: If credentials are invalid.
        """
        user = db.query(User).filter(User.username == username).first()
        if user is None:
            verify_password(password, _get_dummy_hash())
            raise AuthenticationError("Invalid username or password")
        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid username or password")
        return user

    @staticmethod
    def login(db: Session, username: str, password: str) -> Tuple[str, User]:
        """Verify credentials and open a session.

        Returns the raw session token (handed to the client once) and the user.
        """
        try:
            user = AuthService.verify(db, username, password)
        except AuthenticationError:
            logger.warning("Failed login for username=%r", username)
            raise

        token = generate_session_token()
        db.add(UserSession(
            user_id=user.id,
            token_hash=hash_token(token),
            expires_at=utcnow() + timedelta(minutes=settings.SESSION_EXPIRY_MINUTES),
        ))
        db.commit()
        db.refresh(user)
        logger.info("User %s logged in", user.id)
        return token, user

    @staticmethod
    def current_user(db: Session, token: str) -> Optional[str]:
        """Return the user id bound to a live session token, or None."""
        stored = db.query(UserSession).filter(
            UserSession.token_hash == hash_token(token),
            UserSession.expires_at > utcnow(),
        ).first()
        if stored is None:
            return None
        return stored.user_id

    @staticmethod
    def logout(db: Session, token: str) -> None:
        """Destroy the session for a token. Unknown tokens are ignored."""
        deleted = db.query(UserSession).filter(
            UserSession.token_hash == hash_token(token),
        ).delete(synchronize_session=False)
        db.commit()
        if deleted:
            logger.info("Session closed")

    @staticmethod
    def purge_expired_sessions(db: Session) -> int:
        """Delete every expired session row."""
        deleted = db.query(UserSession).filter(
            UserSession.expires_at <= utcnow(),
        ).delete(synchronize_session=False)
        db.commit()
        return deleted

    @staticmethod
    def create_user(
        db: Session,
        username: str,
        password: str,
        role_name: Optional[str] = None,
    ) -> User:
        """Provision a new user, optionally with a role looked up by name."""
        if not username or not password:
            raise ValidationError("Username and password are required")

        existing = db.query(User).filter(User.username == username).first()
        if existing:
            raise ValidationError(f"User '{username}' already exists")

        role_id = None
        if role_name:
            role = db.query(Role).filter(Role.name == role_name).first()
            if not role:
                raise ResourceNotFoundError(f"Role '{role_name}' not found")
            role_id = role.id

        user = User(
            username=username,
            password_hash=hash_password(password),
            role_id=role_id,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    @staticmethod
    def get_user(db: Session, user_id: str) -> User:
        """Get a user by id."""
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise ResourceNotFoundError(f"User {user_id} not found")
        return user


auth_service = AuthService()
