"""Profile (user account) domain model."""

import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..utils.datetime import utcnow


class Profile(Base):
    """A registered student or administrator and their points balance.

    ``points`` is the only balance column and is counted in bottles.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("student_id", name="profiles_student_id_unique"),
        UniqueConstraint("email", name="profiles_email_unique"),
        CheckConstraint("points >= 0", name="profiles_points_non_negative"),
    )

    user_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    student_id = Column(String, nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False)
    password_hash = Column(String, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    points = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    recycling_entries = relationship("RecyclingEntry", back_populates="profile")
    redemptions = relationship("PointRedemption", back_populates="profile")
