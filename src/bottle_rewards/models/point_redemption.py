"""Point redemption audit row."""

import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class PointRedemption(Base):
    """Write-once record created in the same transaction as the balance decrement."""

    __tablename__ = "point_redemptions"
    __table_args__ = (
        CheckConstraint("points_redeemed > 0", name="point_redemptions_points_positive"),
        CheckConstraint("money_amount >= 0", name="point_redemptions_money_non_negative"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("profiles.user_id", ondelete="RESTRICT"), nullable=False)
    rate_id = Column(Integer, ForeignKey("bottle_rates.id", ondelete="SET NULL"))
    points_redeemed = Column(Integer, nullable=False)
    money_amount = Column(Numeric(12, 4), nullable=False)
    redeemed_at = Column(DateTime, default=utcnow, nullable=False)
    processed_by = Column(Uuid(as_uuid=True))

    profile = relationship("Profile", back_populates="redemptions", foreign_keys=[user_id])
    rate = relationship("ExchangeRate")
