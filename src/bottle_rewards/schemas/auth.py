"""Pydantic schemas for sign-up and sign-in."""

from pydantic import BaseModel, EmailStr, Field

from .profile import ProfileRead


class SignUpRequest(BaseModel):
    """Registration form for a student."""

    student_id: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    password: str = Field(..., min_length=1, max_length=1024)


class SignInRequest(BaseModel):
    """Login with a student id or an admin id."""

    login_id: str = Field(..., min_length=1, max_length=64)
    password: str = Field(..., min_length=1, max_length=1024)


class AuthToken(BaseModel):
    """Bearer token issued after a successful sign-in."""

    access_token: str
    token_type: str = "bearer"
    is_admin: bool
    profile: ProfileRead
