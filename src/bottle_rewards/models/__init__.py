"""SQLAlchemy models for the bottle rewards service."""

from .exchange_rate import ExchangeRate
from .point_redemption import PointRedemption
from .profile import Profile
from .recycling_entry import RecyclingEntry

__all__ = [
    "ExchangeRate",
    "PointRedemption",
    "Profile",
    "RecyclingEntry",
]
