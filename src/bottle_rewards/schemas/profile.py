"""Pydantic schemas for profile endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class ProfileSummary(BaseModel):
    """Lightweight projection of profile details."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    student_id: str
    name: str


class ProfileAdminRead(ProfileSummary):
    """Profile row as listed on the redemption desk."""

    email: str
    points: int = Field(..., ge=0)


class ProfileRead(ProfileAdminRead):
    """The caller's own profile, with what the balance is currently worth."""

    is_admin: bool
    created_at: datetime
    updated_at: datetime
    redeemable_value: Optional[Decimal] = Field(
        None, description="Money the balance is worth in whole units at the active rate."
    )


class ProfileUpdate(BaseModel):
    """Self-service profile edit."""

    name: Optional[str] = Field(None, min_length=1, max_length=120)
    email: Optional[EmailStr] = None
