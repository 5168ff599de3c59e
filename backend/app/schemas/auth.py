"""Auth schemas."""

from pydantic import EmailStr

from app.schemas.base import BaseSchema


class ResetPasswordRequest(BaseSchema):
    """Request a password recovery link."""

    email: EmailStr


class ResetPasswordResponse(BaseSchema):
    message: str = "Reset link sent."


class CurrentUserResponse(BaseSchema):
    """Current authenticated user info."""

    uid: str
    email: str | None = None
    email_verified: bool = False
    full_name: str | None = None
    role: str | None = None
    home_path: str
