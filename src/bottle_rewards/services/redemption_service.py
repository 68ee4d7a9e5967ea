"""Domain logic for point redemptions."""

from __future__ import annotations

import logging
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.orm import Session, joinedload

from ..core.errors import BelowMinimumUnit, InsufficientBalance, InvalidQuantity
from ..models import PointRedemption, Profile
from .conversion import RoundingPolicy, quantity_to_money
from .profile_service import get_profile
from .rate_service import require_active_rate

logger = logging.getLogger(__name__)


def redeem(
    session: Session,
    *,
    user_id: UUID,
    quantity: int,
    processed_by: Optional[UUID] = None,
) -> tuple[PointRedemption, int]:
    """Convert ``quantity`` points into money and return the record with the remaining balance.

    Every precondition is checked before anything is written. The balance
    decrement and the redemption row are flushed in the caller's transaction,
    so a single commit (or rollback) applies both or neither.
    """

    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantity("Points to redeem must be a positive whole number.")

    rate = require_active_rate(session)

    # Row lock serializes concurrent redemptions for the same account.
    profile = get_profile(session, user_id, for_update=True)
    if quantity < rate.bottles_per_unit:
        raise BelowMinimumUnit(
            f"The minimum redemption is {rate.bottles_per_unit} points "
            f"({rate.money_per_unit} per unit)."
        )
    if quantity > profile.points:
        raise InsufficientBalance(f"Requested {quantity} points but only {profile.points} are available.")
    if quantity % rate.bottles_per_unit != 0:
        raise InvalidQuantity(f"Points must be redeemed in multiples of {rate.bottles_per_unit}.")

    money = quantity_to_money(quantity, rate, RoundingPolicy.WHOLE_UNITS)

    result = session.execute(
        update(Profile)
        .where(Profile.user_id == profile.user_id, Profile.points >= quantity)
        .values(points=Profile.points - quantity)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        raise InsufficientBalance()

    redemption = PointRedemption(
        user_id=profile.user_id,
        rate_id=rate.id,
        points_redeemed=quantity,
        money_amount=money,
        processed_by=processed_by,
    )
    session.add(redemption)
    session.flush()

    session.refresh(profile)
    session.refresh(redemption)

    logger.info(
        "user %s redeemed %s points for %s at rate %s (remaining %s)",
        profile.user_id,
        quantity,
        money,
        rate.id,
        profile.points,
    )
    return redemption, profile.points


def list_redemptions(
    session: Session,
    *,
    user_id: Optional[UUID] = None,
    limit: int = 50,
    offset: int = 0,
) -> Sequence[PointRedemption]:
    """Return redemption records newest first, with their profile loaded."""

    stmt = (
        select(PointRedemption)
        .options(joinedload(PointRedemption.profile))
        .order_by(PointRedemption.redeemed_at.desc())
        .offset(offset)
        .limit(limit)
    )
    if user_id:
        stmt = stmt.where(PointRedemption.user_id == user_id)
    return session.execute(stmt).scalars().all()
