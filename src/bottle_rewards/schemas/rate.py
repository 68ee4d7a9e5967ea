"""Exchange rate schemas."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class RateRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    bottles_per_unit: int
    money_per_unit: Decimal
    is_active: bool = True
    created_at: datetime


class RateCreate(BaseModel):
    """New exchange rate set by an administrator."""

    bottles_per_unit: int = Field(..., gt=0, description="Bottles that make up one unit.")
    money_per_unit: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)


class MoneyQuote(BaseModel):
    """Preview of what a quantity is worth at the active rate."""

    quantity: int
    money: Decimal
    whole_units: int
    rate: RateRead
