"""Authentication schemas."""
import uuid

from pydantic import BaseModel, EmailStr, Field


class UserCredentials(BaseModel):
    """Registration / credential update request."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UserLogin(BaseModel):
    """User login request."""

    email: str
    password: str
    expires_in_seconds: int | None = None  # capped at one hour


class UserResponse(BaseModel):
    """Public user profile; never carries the password hash."""

    id: str
    email: str
    is_chirpy_red: bool = False
    created_at: str
    updated_at: str

    class Config:
        from_attributes = True


class LoginResponse(UserResponse):
    """Login response: profile plus both tokens."""

    token: str
    refresh_token: str


class Token(BaseModel):
    """Session token response."""

    token: str


class MessageResponse(BaseModel):
    """Generic message response."""

    message: str


class PolkaWebhookData(BaseModel):
    user_id: uuid.UUID


class PolkaWebhook(BaseModel):
    """Payment provider event."""

    event: str
    data: PolkaWebhookData
