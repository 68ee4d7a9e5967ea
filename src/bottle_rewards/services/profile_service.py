"""Profile lookups and self-service edits."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.errors import DuplicateEmail, ProfileNotFound
from ..models import Profile
from .conversion import RoundingPolicy, quantity_to_money
from .rate_service import active_rate_cache

logger = logging.getLogger(__name__)


def get_profile(session: Session, user_id: UUID, *, for_update: bool = False) -> Profile:
    stmt = select(Profile).where(Profile.user_id == user_id)
    if for_update:
        # Reload attributes already in the session with the values read under the lock.
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    profile = session.execute(stmt).scalar_one_or_none()
    if profile is None:
        raise ProfileNotFound(f"Profile {user_id} not found")
    return profile


def find_by_student_id(session: Session, student_id: str) -> Optional[Profile]:
    stmt = select(Profile).where(Profile.student_id == student_id)
    return session.execute(stmt).scalar_one_or_none()


def find_by_email(session: Session, email: str) -> Optional[Profile]:
    stmt = select(Profile).where(func.lower(Profile.email) == email.lower())
    return session.execute(stmt).scalar_one_or_none()


def list_profiles(session: Session, *, include_admins: bool = False) -> Sequence[Profile]:
    """Return profiles ordered by student id."""

    stmt = select(Profile).order_by(Profile.student_id.asc())
    if not include_admins:
        stmt = stmt.where(Profile.is_admin.is_(False))
    return session.execute(stmt).scalars().all()


def update_profile(
    session: Session,
    user_id: UUID,
    *,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> Profile:
    """Change display name and/or e-mail. The balance is never touched here."""

    profile = get_profile(session, user_id)

    if email is not None and email.lower() != profile.email.lower():
        other = find_by_email(session, email)
        if other is not None and other.user_id != profile.user_id:
            raise DuplicateEmail()
        profile.email = email
    if name is not None:
        profile.name = name

    session.flush()
    session.refresh(profile)
    logger.info("profile %s updated", profile.user_id)
    return profile


def redeemable_value(session: Session, balance: int) -> Optional[Decimal]:
    """Money the balance is currently worth in whole units, if a rate is known.

    Best effort: a failed rate lookup yields ``None`` rather than an error.
    """

    try:
        rate = active_rate_cache.get(session)
    except SQLAlchemyError:
        logger.warning("rate lookup failed while valuing balance", exc_info=True)
        return None
    if rate is None:
        return None
    return quantity_to_money(balance, rate, RoundingPolicy.WHOLE_UNITS)
