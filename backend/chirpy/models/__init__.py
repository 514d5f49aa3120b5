"""SQLAlchemy models package."""
from chirpy.models.user import User
from chirpy.models.auth import RefreshToken

__all__ = [
    "User",
    "RefreshToken",
]
