"""Security primitives:
- Argon2id password hashing via argon2-cffi
- HS256 session tokens via python-jose
- Authorization header parsing (Bearer / ApiKey)
- Opaque refresh token generation
"""
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
import secrets
import uuid

from argon2 import PasswordHasher
from argon2 import exceptions as argon2_exceptions
from jose import jwt
from jose.exceptions import JOSEError

from chirpy.exceptions import (
    HashingError,
    MalformedHeaderError,
    SigningError,
    TokenValidationError,
)

TOKEN_ISSUER = "chirpy"
TOKEN_ALGORITHM = "HS256"
REFRESH_TOKEN_BYTES = 32

ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Hash a plaintext password using Argon2id with a fresh salt."""
    try:
        return ph.hash(password)
    except argon2_exceptions.HashingError as exc:
        raise HashingError(f"could not hash password: {exc}") from exc


def verify_password(password: str, hashed_password: str) -> bool:
    """Check a plaintext password against a stored Argon2 hash.

    Returns False for a wrong password. Raises HashingError only when the
    stored hash itself cannot be parsed.
    """
    try:
        return ph.verify(hashed_password, password)
    except argon2_exceptions.VerifyMismatchError:
        return False
    except (argon2_exceptions.InvalidHashError, argon2_exceptions.VerificationError) as exc:
        raise HashingError(f"could not compare password to stored hash: {exc}") from exc


def make_jwt(user_id: uuid.UUID | str, secret: str, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Create a signed session token for ``user_id``.

    ``expires_in`` is used as given; capping it is the caller's job.
    """
    issued_at = datetime.now(timezone.utc)
    claims = {
        "iss": TOKEN_ISSUER,
        "sub": str(user_id),
        "iat": int(issued_at.timestamp()),
        "exp": int((issued_at + expires_in).timestamp()),
    }
    try:
        return jwt.encode(claims, secret, algorithm=TOKEN_ALGORITHM)
    except JOSEError as exc:
        raise SigningError(f"could not sign token: {exc}") from exc


def validate_jwt(token: str, secret: str) -> str:
    """Validate a session token and return the user id in its subject.

    Signature and algorithm are checked first; expiry and subject shape are
    checked afterwards on the verified claims.
    """
    try:
        header = jwt.get_unverified_header(token)
    except JOSEError as exc:
        raise TokenValidationError(f"could not parse token: {exc}") from exc

    if header.get("alg") != TOKEN_ALGORITHM:
        raise TokenValidationError(f"unexpected signing method: {header.get('alg')}")

    try:
        claims = jwt.decode(
            token,
            secret,
            algorithms=[TOKEN_ALGORITHM],
            options={"verify_exp": False},
        )
    except JOSEError as exc:
        raise TokenValidationError(f"could not verify token: {exc}") from exc

    expires_at = claims.get("exp")
    if not isinstance(expires_at, (int, float)):
        raise TokenValidationError("token has no expiry")
    if expires_at <= datetime.now(timezone.utc).timestamp():
        raise TokenValidationError("token has expired")

    try:
        return str(uuid.UUID(str(claims.get("sub", ""))))
    except ValueError as exc:
        raise TokenValidationError("could not parse subject claim to a user id") from exc


def _get_authorization(headers: Mapping[str, str], scheme: str) -> str:
    value = headers.get("Authorization")
    if not value:
        raise MalformedHeaderError("authorization header missing")

    parts = value.split()
    if len(parts) != 2 or parts[0] != scheme:
        raise MalformedHeaderError(f"authorization header is not in the {scheme} scheme")

    return parts[1]


def get_bearer_token(headers: Mapping[str, str]) -> str:
    """Extract the credential from ``Authorization: Bearer <token>``."""
    return _get_authorization(headers, "Bearer")


def get_api_key(headers: Mapping[str, str]) -> str:
    """Extract the credential from ``Authorization: ApiKey <key>``."""
    return _get_authorization(headers, "ApiKey")


def make_refresh_token() -> str:
    """64 lowercase hex characters from 32 random bytes."""
    return secrets.token_hex(REFRESH_TOKEN_BYTES)
