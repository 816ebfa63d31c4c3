"""
ChoreoNotes Backend — User and Auth Schemas
============================================

What:  Payloads for POST /api/auth/register and /login, plus the public user
       projection returned everywhere a user is shown.
"""

from datetime import datetime

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def check_email(v: str) -> str:
    """Reject malformed addresses but keep the value exactly as sent.

    email-validator normalizes the domain to lowercase; accounts are matched
    case-sensitively, so only its verdict is used.
    """
    try:
        validate_email(v, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"Invalid email address: {e}")
    return v


class RegisterRequest(BaseModel):
    email: str = Field(description="Login email (unique, matched exactly)")
    password: str = Field(min_length=6, description="At least 6 characters")
    username: str = Field(min_length=3, max_length=50, description="Display name")

    model_config = {"extra": "forbid"}

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        return check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password_length(cls, v: str) -> str:
        if len(v.encode("utf-8")) > BCRYPT_MAX_BYTES:
            raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes long")
        return v


class LoginRequest(BaseModel):
    email: str
    password: str = Field(min_length=1)

    model_config = {"extra": "forbid"}

    @field_validator("email")
    @classmethod
    def validate_email_format(cls, v: str) -> str:
        return check_email(v)


class UserResponse(BaseModel):
    """Public user projection. Never includes the password hash."""
    id: int
    email: str
    username: str
    created_at: datetime

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    """Returned by register (201) and login (200)."""
    message: str
    user: UserResponse
    token: str = Field(description="Bearer token, valid for JWT_EXPIRES_HOURS")


class CurrentUserResponse(BaseModel):
    user: UserResponse
