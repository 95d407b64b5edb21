"""Request/response schemas for auth endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class SignupRequest(BaseModel):
    """Payload for account creation; every field is required."""

    username: str = Field(
        ...,
        min_length=3,
        max_length=64,
        pattern=r"^[A-Za-z0-9_.]+$",
        description="Unique handle (letters, digits, '_' and '.')",
    )
    full_name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Address the verification code is sent to")
    password: str = Field(..., min_length=5, max_length=128, description="Password")


class LoginRequest(BaseModel):
    """Credentials for login; the identifier matches either username or email."""

    username_or_email: str = Field(..., min_length=1, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class VerifyEmailRequest(BaseModel):
    code: str = Field(..., pattern=r"^[0-9]{6}$", description="6-digit verification code")


class SessionIdentity(BaseModel):
    """Identity carried by a valid session token; bound once per request."""

    model_config = ConfigDict(frozen=True)

    id: int
    username: str


class UserResponse(BaseModel):
    """Account as returned by signup, login, verification and /me (no password hash)."""

    id: int
    username: str
    full_name: str
    email: str
    profile_image_url: str | None = None
    bio: str | None = None
    is_verified: bool
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class SignupResponse(BaseModel):
    """Created account plus whether the verification email went out (False = degraded success)."""

    user: UserResponse
    email_sent: bool
