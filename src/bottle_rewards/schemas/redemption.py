"""Pydantic schemas for redemption workflows."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from .profile import ProfileSummary


class RedemptionCreate(BaseModel):
    """Incoming payload for redeeming a student's points."""

    user_id: UUID
    points: int = Field(..., description="Number of points to redeem.")


class RedemptionRead(BaseModel):
    """Represents a redemption record."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    profile: ProfileSummary
    rate_id: Optional[int]
    points_redeemed: int
    money_amount: Decimal
    redeemed_at: datetime


class RedemptionReceipt(BaseModel):
    """Response returned after processing a redemption."""

    redemption: RedemptionRead
    available_balance: int = Field(..., description="Points balance after this redemption.")
