"""Recycling submissions and their reporting."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

from sqlalchemy import Numeric, func, select, update
from sqlalchemy.orm import Session

from ..core.errors import InvalidQuantity
from ..models import Profile, RecyclingEntry
from .conversion import RoundingPolicy, quantity_to_money, to_decimal
from .profile_service import get_profile
from .rate_service import require_active_rate

logger = logging.getLogger(__name__)


@dataclass
class RecyclingStats:
    """Per-student aggregate used by the admin dashboard."""

    user_id: UUID
    student_id: str
    name: str
    total_bottles: int
    total_money: Decimal
    transaction_count: int
    last_transaction: Optional[datetime]


def submit_bottles(session: Session, *, user_id: UUID, quantity: int) -> RecyclingEntry:
    """Credit ``quantity`` bottles to the user and record the submission.

    The balance grows by the bottle count; ``money_received`` is the
    proportional money value at the rate active right now.
    """

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity("Please enter a valid number of bottles.")

    profile = get_profile(session, user_id)
    rate = require_active_rate(session)
    money = quantity_to_money(quantity, rate, RoundingPolicy.PROPORTIONAL)

    entry = RecyclingEntry(
        user_id=profile.user_id,
        rate_id=rate.id,
        bottles=quantity,
        money_received=money,
    )
    session.add(entry)

    session.execute(
        update(Profile)
        .where(Profile.user_id == profile.user_id)
        .values(points=Profile.points + quantity)
        .execution_options(synchronize_session=False)
    )
    session.flush()
    session.refresh(profile)
    session.refresh(entry)

    logger.info(
        "user %s submitted %s bottles worth %s at rate %s (balance %s)",
        profile.user_id,
        quantity,
        money,
        rate.id,
        profile.points,
    )
    return entry


def list_history(
    session: Session,
    *,
    user_id: UUID,
    limit: int = 100,
    offset: int = 0,
) -> Sequence[RecyclingEntry]:
    """Return a user's submissions, newest first."""

    stmt = (
        select(RecyclingEntry)
        .where(RecyclingEntry.user_id == user_id)
        .order_by(RecyclingEntry.date.desc())
        .offset(offset)
        .limit(limit)
    )
    return session.execute(stmt).scalars().all()


def recycling_stats(session: Session) -> List[RecyclingStats]:
    """Aggregate submissions per student, most bottles first."""

    total_bottles = func.coalesce(func.sum(RecyclingEntry.bottles), 0).label("total_bottles")
    total_money = func.coalesce(
        func.sum(RecyclingEntry.money_received), 0, type_=Numeric(14, 4)
    ).label("total_money")
    transaction_count = func.count(RecyclingEntry.id).label("transaction_count")
    last_transaction = func.max(RecyclingEntry.date).label("last_transaction")

    stmt = (
        select(
            Profile.user_id,
            Profile.student_id,
            Profile.name,
            total_bottles,
            total_money,
            transaction_count,
            last_transaction,
        )
        .join(RecyclingEntry, RecyclingEntry.user_id == Profile.user_id)
        .group_by(Profile.user_id, Profile.student_id, Profile.name)
        .order_by(total_bottles.desc(), Profile.student_id.asc())
    )

    return [
        RecyclingStats(
            user_id=row.user_id,
            student_id=row.student_id,
            name=row.name,
            total_bottles=int(row.total_bottles or 0),
            total_money=to_decimal(row.total_money or 0),
            transaction_count=int(row.transaction_count or 0),
            last_transaction=row.last_transaction,
        )
        for row in session.execute(stmt).all()
    ]
