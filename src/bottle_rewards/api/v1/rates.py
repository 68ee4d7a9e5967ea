"""Exchange rate endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import NoActiveRate, RewardsError
from ...schemas import MoneyQuote, RateCreate, RateRead
from ...services import rate_service
from ...services.conversion import RoundingPolicy, quantity_to_money, whole_units
from ...services.identity_service import AuthContext
from ..deps import require_admin, rule_violation, store_failure

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get(
    "/active",
    response_model=RateRead,
    summary="Current exchange rate",
    responses={
        200: {
            "description": "Most recently created active rate",
            "content": {
                "application/json": {
                    "example": {
                        "id": 3,
                        "bottles_per_unit": 40,
                        "money_per_unit": "5.00",
                        "is_active": True,
                        "created_at": "2025-11-12T10:15:30",
                    }
                }
            },
        },
        409: {"description": "No active rate configured"},
    },
)
def get_active_rate(db: Session = Depends(get_db)) -> RateRead:
    """Return the active rate; served from a short-lived cache."""

    try:
        rate = rate_service.active_rate_cache.get(db)
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc
    if rate is None:
        raise NoActiveRate().to_http()
    return RateRead.model_validate(rate)


@router.get(
    "/quote",
    response_model=MoneyQuote,
    summary="Preview the money value of a quantity",
    responses={
        400: {"description": "Negative quantity"},
        409: {"description": "No active rate configured"},
    },
)
def quote(
    quantity: int = Query(..., description="Bottles or points to value"),
    policy: RoundingPolicy = Query(RoundingPolicy.WHOLE_UNITS, description="Rounding policy to apply"),
    db: Session = Depends(get_db),
) -> MoneyQuote:
    try:
        rate = rate_service.active_rate_cache.get(db)
        if rate is None:
            raise NoActiveRate()
        money = quantity_to_money(quantity, rate, policy)
    except RewardsError as exc:
        raise exc.to_http() from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc

    return MoneyQuote(
        quantity=quantity,
        money=money,
        whole_units=whole_units(quantity, rate),
        rate=RateRead.model_validate(rate),
    )


@router.get("", response_model=List[RateRead], summary="Rate history")
def list_rates(
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[RateRead]:
    try:
        return list(rate_service.list_rates(db, limit=limit, offset=offset))
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.post(
    "",
    response_model=RateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Set a new exchange rate",
    responses={403: {"description": "Administrators only"}},
)
def create_rate(
    payload: RateCreate,
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RateRead:
    """Deactivate the current rate and activate a new one.

    Example request body::

        {
            "bottles_per_unit": 40,
            "money_per_unit": "5.00"
        }
    """

    try:
        rate = rate_service.set_active_rate(
            db,
            bottles_per_unit=payload.bottles_per_unit,
            money_per_unit=payload.money_per_unit,
        )
        db.commit()
        db.refresh(rate)
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc

    rate_service.active_rate_cache.invalidate()
    return rate
