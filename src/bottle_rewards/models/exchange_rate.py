"""Exchange rate between recycled bottles and money."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, Numeric

from ..core.database import Base
from ..utils.datetime import utcnow


class ExchangeRate(Base):
    """Append-only rate history; the newest active row is the current rate."""

    __tablename__ = "bottle_rates"
    __table_args__ = (
        CheckConstraint("bottles_per_unit > 0", name="bottle_rates_bottles_positive"),
        CheckConstraint("money_per_unit > 0", name="bottle_rates_money_positive"),
        Index("bottle_rates_active_created_idx", "is_active", "created_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    bottles_per_unit = Column(Integer, nullable=False)
    money_per_unit = Column(Numeric(10, 2), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
