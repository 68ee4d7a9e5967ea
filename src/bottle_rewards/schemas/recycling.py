"""Pydantic schemas for recycling submissions."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class RecyclingCreate(BaseModel):
    """Incoming payload for a bottle submission."""

    bottles: int = Field(..., description="Number of bottles recycled.")


class RecyclingEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    rate_id: Optional[int]
    date: datetime
    bottles: int
    money_received: Decimal


class RecyclingStatsRead(BaseModel):
    """Aggregated submissions for one student."""

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID
    student_id: str
    name: str
    total_bottles: int = Field(..., ge=0)
    total_money: Decimal
    transaction_count: int = Field(..., ge=0)
    last_transaction: Optional[datetime]
