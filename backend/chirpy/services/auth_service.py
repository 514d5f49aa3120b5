"""Authentication flows: register, login, refresh, revoke, update credentials.

Every flow takes its store as an argument. Anything implementing the
protocols below works, which is how the tests run without a database.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta
import logging
from typing import Protocol

from chirpy.exceptions import (
    EmailAlreadyRegisteredError,
    HashingError,
    InvalidCredentialsError,
    NotFoundError,
    UnauthorizedError,
)
from chirpy.models.auth import RefreshToken
from chirpy.models.user import User
from chirpy.security import hash_password, make_jwt, make_refresh_token, verify_password

logger = logging.getLogger(__name__)

SESSION_TOKEN_MAX_TTL = timedelta(hours=1)
REFRESH_TOKEN_TTL = timedelta(days=60)


class UserStore(Protocol):
    def create_user(self, email: str, hashed_password: str) -> User: ...

    def get_user(self, user_id: str) -> User | None: ...

    def get_user_by_email(self, email: str) -> User | None: ...

    def update_user(self, user_id: str, email: str, hashed_password: str) -> User | None: ...

    def upgrade_user(self, user_id: str) -> User | None: ...

    def delete_all_users(self) -> int: ...


class RefreshTokenStore(Protocol):
    def create_refresh_token(self, token: str, user_id: str, expires_at: datetime) -> RefreshToken: ...

    def get_refresh_token(self, token: str) -> RefreshToken | None: ...

    def revoke_refresh_token(self, token: str) -> RefreshToken | None: ...


class AuthStore(UserStore, RefreshTokenStore, Protocol):
    """Everything the login flow touches."""


@dataclass
class LoginResult:
    user: User
    token: str
    refresh_token: str


def clamp_session_ttl(expires_in_seconds: int | None) -> timedelta:
    """Requested session lifetime, defaulting to and capped at one hour."""
    if not expires_in_seconds or expires_in_seconds <= 0:
        return SESSION_TOKEN_MAX_TTL
    # compare as int; huge values overflow timedelta
    if expires_in_seconds > SESSION_TOKEN_MAX_TTL.total_seconds():
        return SESSION_TOKEN_MAX_TTL
    return timedelta(seconds=expires_in_seconds)


def register_user(store: UserStore, email: str, password: str) -> User:
    """Create an account with a hashed password."""
    if store.get_user_by_email(email) is not None:
        raise EmailAlreadyRegisteredError("Email already registered")

    user = store.create_user(email, hash_password(password))
    logger.info(f"New user {user.id} registered")
    return user


def issue_refresh_token(
    store: RefreshTokenStore,
    user_id: str,
    ttl: timedelta = REFRESH_TOKEN_TTL,
) -> RefreshToken:
    """Mint and persist a new refresh token for ``user_id``."""
    return store.create_refresh_token(
        make_refresh_token(),
        user_id,
        datetime.utcnow() + ttl,
    )


def login(
    store: AuthStore,
    email: str,
    password: str,
    secret: str,
    expires_in_seconds: int | None = None,
    refresh_ttl: timedelta = REFRESH_TOKEN_TTL,
) -> LoginResult:
    """Check credentials and hand out a session token plus refresh token.

    Unknown email, wrong password and an unreadable stored hash all raise the
    same InvalidCredentialsError.
    """
    user = store.get_user_by_email(email)
    if user is None:
        logger.warning("Login rejected: unknown email")
        raise InvalidCredentialsError()

    try:
        matched = verify_password(password, user.hashed_password)
    except HashingError:
        logger.exception(f"Stored password hash for user {user.id} is unreadable")
        raise InvalidCredentialsError()
    if not matched:
        logger.warning(f"Login rejected: wrong password for user {user.id}")
        raise InvalidCredentialsError()

    token = make_jwt(user.id, secret, clamp_session_ttl(expires_in_seconds))
    refresh_token = issue_refresh_token(store, user.id, refresh_ttl)

    logger.info(f"User {user.id} logged in")
    return LoginResult(user=user, token=token, refresh_token=refresh_token.token)


def refresh_session(store: RefreshTokenStore, presented_token: str, secret: str) -> str:
    """Exchange a live refresh token for a new one-hour session token."""
    record = store.get_refresh_token(presented_token)
    if record is None:
        raise UnauthorizedError("Refresh token not found")

    if record.revoked_at:
        logger.warning(f"Refresh rejected: revoked token for user {record.user_id}")
        raise UnauthorizedError("Refresh token has been revoked")

    try:
        expires_at = datetime.fromisoformat(record.expires_at)
    except (TypeError, ValueError):
        raise UnauthorizedError("Invalid refresh token")
    if expires_at <= datetime.utcnow():
        logger.warning(f"Refresh rejected: expired token for user {record.user_id}")
        raise UnauthorizedError("Refresh token expired")

    return make_jwt(record.user_id, secret, SESSION_TOKEN_MAX_TTL)


def revoke_refresh_token(store: RefreshTokenStore, presented_token: str) -> None:
    """Stamp ``revoked_at`` on the token.

    Revoking twice succeeds and moves the timestamp forward; only whether
    it is set matters to refresh_session.
    """
    if store.revoke_refresh_token(presented_token) is None:
        raise NotFoundError("Refresh token not found")


def update_credentials(store: UserStore, user_id: str, email: str, password: str) -> User:
    """Replace email and password for the authenticated user."""
    existing = store.get_user_by_email(email)
    if existing is not None and existing.id != user_id:
        raise EmailAlreadyRegisteredError("Email already registered")

    user = store.update_user(user_id, email, hash_password(password))
    if user is None:
        raise NotFoundError("User not found")

    logger.info(f"User {user_id} updated credentials")
    return user


def upgrade_user(store: UserStore, user_id: str) -> User:
    """Mark a user as Chirpy Red."""
    user = store.upgrade_user(user_id)
    if user is None:
        raise NotFoundError("User not found")

    logger.info(f"User {user_id} upgraded to Chirpy Red")
    return user


def reset_users(store: UserStore) -> int:
    deleted = store.delete_all_users()
    logger.warning(f"Deleted {deleted} users")
    return deleted
