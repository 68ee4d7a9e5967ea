"""Exchange rate resolution and administration."""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, Sequence, Union

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.errors import InvalidQuantity, NoActiveRate
from ..models import ExchangeRate
from .conversion import to_decimal

logger = logging.getLogger(__name__)

MONEY_PER_UNIT_QUANTUM = Decimal("0.01")


@dataclass(frozen=True)
class RateSnapshot:
    """Detached, immutable copy of an exchange rate row."""

    id: int
    bottles_per_unit: int
    money_per_unit: Decimal
    created_at: datetime

    @classmethod
    def from_model(cls, rate: ExchangeRate) -> "RateSnapshot":
        return cls(
            id=rate.id,
            bottles_per_unit=rate.bottles_per_unit,
            money_per_unit=to_decimal(rate.money_per_unit),
            created_at=rate.created_at,
        )


class ActiveRateCache:
    """Memoizes the active rate for read-only callers for ``ttl_seconds``.

    Mutating operations never read through this cache; they resolve the rate
    inside their own transaction.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._value: Optional[RateSnapshot] = None
        self._expires_at: float = 0.0
        self._loaded = False

    def get(self, session: Session) -> Optional[RateSnapshot]:
        with self._lock:
            now = self._clock()
            if self._loaded and now < self._expires_at:
                return self._value

            rate = resolve_active_rate(session)
            self._value = RateSnapshot.from_model(rate) if rate is not None else None
            self._expires_at = now + self.ttl_seconds
            self._loaded = True
            return self._value

    def invalidate(self) -> None:
        with self._lock:
            self._value = None
            self._expires_at = 0.0
            self._loaded = False


active_rate_cache = ActiveRateCache(ttl_seconds=get_settings().rate_cache_ttl_seconds)


def resolve_active_rate(session: Session) -> Optional[ExchangeRate]:
    """Return the most recently created active rate, or ``None``."""

    stmt = (
        select(ExchangeRate)
        .where(ExchangeRate.is_active.is_(True))
        .order_by(ExchangeRate.created_at.desc(), ExchangeRate.id.desc())
        .limit(1)
    )
    return session.execute(stmt).scalar_one_or_none()


def require_active_rate(session: Session) -> ExchangeRate:
    rate = resolve_active_rate(session)
    if rate is None:
        raise NoActiveRate()
    return rate


def set_active_rate(
    session: Session,
    *,
    bottles_per_unit: int,
    money_per_unit: Union[Decimal, int, float, str],
) -> ExchangeRate:
    """Deactivate the current rate(s) and insert a new active rate."""

    money = to_decimal(money_per_unit)
    if isinstance(bottles_per_unit, bool) or not isinstance(bottles_per_unit, int) or bottles_per_unit <= 0:
        raise InvalidQuantity("bottles_per_unit must be a positive whole number.")
    # Stored as Numeric(10, 2).
    if not money.is_finite() or money != money.quantize(MONEY_PER_UNIT_QUANTUM):
        raise InvalidQuantity("money_per_unit may have at most 2 decimal places.")
    if money <= 0:
        raise InvalidQuantity("money_per_unit must be greater than zero.")

    session.execute(
        update(ExchangeRate)
        .where(ExchangeRate.is_active.is_(True))
        .values(is_active=False)
        .execution_options(synchronize_session="fetch")
    )

    rate = ExchangeRate(bottles_per_unit=bottles_per_unit, money_per_unit=money, is_active=True)
    session.add(rate)
    session.flush()
    session.refresh(rate)

    active_rate_cache.invalidate()
    logger.info("exchange rate %s activated: %s bottles = %s", rate.id, bottles_per_unit, money)
    return rate


def seed_default_rate(session: Session) -> Optional[ExchangeRate]:
    """Insert the configured default rate when the rate table is empty."""

    settings = get_settings()
    exists = session.execute(select(ExchangeRate.id).limit(1)).scalar_one_or_none()
    if exists is not None:
        return None

    rate = set_active_rate(
        session,
        bottles_per_unit=settings.default_bottles_per_unit,
        money_per_unit=settings.default_money_per_unit,
    )
    logger.info("seeded default exchange rate %s", rate.id)
    return rate


def list_rates(session: Session, *, limit: int = 50, offset: int = 0) -> Sequence[ExchangeRate]:
    """Rate history, newest first."""

    stmt = (
        select(ExchangeRate)
        .order_by(ExchangeRate.created_at.desc(), ExchangeRate.id.desc())
        .offset(offset)
        .limit(limit)
    )
    return session.execute(stmt).scalars().all()
