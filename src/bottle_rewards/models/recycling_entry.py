"""Recycling submission audit row."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class RecyclingEntry(Base):
    """Write-once record of a bottle submission and the money it was worth."""

    __tablename__ = "recycling_history"
    __table_args__ = (
        CheckConstraint("bottles > 0", name="recycling_history_bottles_positive"),
        CheckConstraint("money_received >= 0", name="recycling_history_money_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.user_id", ondelete="RESTRICT"), nullable=False)
    rate_id = Column(Integer, ForeignKey("bottle_rates.id", ondelete="SET NULL"))
    date = Column(DateTime, default=utcnow, nullable=False)
    bottles = Column(Integer, nullable=False)
    money_received = Column(Numeric(12, 4), nullable=False)

    profile = relationship("Profile", back_populates="recycling_entries")
    rate = relationship("ExchangeRate")
