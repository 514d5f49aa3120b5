"""Errors raised by the auth pipeline.

Route handlers translate these into HTTP responses; nothing below the API
layer knows about status codes.
"""


class ChirpyError(Exception):
    """Base class for all application errors."""


class HashingError(ChirpyError):
    """Password hashing or verification failed (malformed stored hash)."""


class SigningError(ChirpyError):
    """A session token could not be signed."""


class TokenValidationError(ChirpyError):
    """Session token is malformed, expired, or has a bad signature."""


class MalformedHeaderError(ChirpyError):
    """Authorization header is missing or not in the expected scheme."""


class NotFoundError(ChirpyError):
    """A user or refresh token does not exist."""


class StoreError(ChirpyError):
    """The relational store failed; details are logged, never returned."""


class UnauthorizedError(ChirpyError):
    """Credentials were presented but are not acceptable."""


class InvalidCredentialsError(UnauthorizedError):
    """Login failed. Deliberately does not say which factor was wrong."""

    def __init__(self, message: str = "Incorrect email or password"):
        super().__init__(message)


class EmailAlreadyRegisteredError(ChirpyError):
    """Another account already uses this email."""
