"""SQLAlchemy-backed implementation of the auth store protocols."""
from datetime import datetime
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from chirpy.exceptions import StoreError
from chirpy.models.auth import RefreshToken
from chirpy.models.user import User

logger = logging.getLogger(__name__)


class SQLAuthStore:
    """Users and refresh tokens in the relational database.

    Each write commits on its own; failures roll back and surface as
    StoreError.
    """

    def __init__(self, db: Session):
        self.db = db

    def _commit(self, action: str) -> None:
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Could not {action}: {exc}")
            raise StoreError(f"could not {action}") from exc

    def _first(self, query, action: str):
        try:
            return query.first()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Could not {action}: {exc}")
            raise StoreError(f"could not {action}") from exc

    # Users

    def create_user(self, email: str, hashed_password: str) -> User:
        user = User(email=email, hashed_password=hashed_password)
        self.db.add(user)
        self._commit("create user")
        self.db.refresh(user)
        return user

    def get_user(self, user_id: str) -> User | None:
        return self._first(self.db.query(User).filter(User.id == user_id), "fetch user")

    def get_user_by_email(self, email: str) -> User | None:
        return self._first(self.db.query(User).filter(User.email == email), "fetch user by email")

    def update_user(self, user_id: str, email: str, hashed_password: str) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None

        user.email = email
        user.hashed_password = hashed_password
        self._commit("update user")
        self.db.refresh(user)
        return user

    def upgrade_user(self, user_id: str) -> User | None:
        user = self.get_user(user_id)
        if user is None:
            return None

        user.is_chirpy_red = True
        self._commit("upgrade user")
        self.db.refresh(user)
        return user

    def delete_all_users(self) -> int:
        try:
            self.db.query(RefreshToken).delete(synchronize_session=False)
            deleted = self.db.query(User).delete(synchronize_session=False)
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(f"Could not delete users: {exc}")
            raise StoreError("could not delete users") from exc
        self._commit("delete users")
        return deleted

    # Refresh tokens

    def create_refresh_token(self, token: str, user_id: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(
            token=token,
            user_id=user_id,
            expires_at=expires_at.isoformat(),
        )
        self.db.add(record)
        self._commit("create refresh token")
        self.db.refresh(record)
        return record

    def get_refresh_token(self, token: str) -> RefreshToken | None:
        return self._first(
            self.db.query(RefreshToken).filter(RefreshToken.token == token),
            "fetch refresh token",
        )

    def revoke_refresh_token(self, token: str) -> RefreshToken | None:
        record = self.get_refresh_token(token)
        if record is None:
            return None

        now = datetime.utcnow().isoformat()
        record.revoked_at = now
        record.updated_at = now
        self._commit("revoke refresh token")
        return record
