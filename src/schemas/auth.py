"""Pydantic schemas for sign-up and sign-in."""
from pydantic import BaseModel, EmailStr, Field, field_validator


class AuthRequest(BaseModel):
    """Email/password pair used by both /auth/signup and /auth/signin."""

    email: EmailStr
    password: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are compared case-insensitively."""
        return v.strip().lower()


class TokenResponse(BaseModel):
    """Access token issued after a successful sign-up or sign-in."""

    access_token: str
    token_type: str = "bearer"
