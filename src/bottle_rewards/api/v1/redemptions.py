"""Endpoints for point redemptions."""

from __future__ import annotations

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import RewardsError
from ...schemas import RedemptionCreate, RedemptionRead, RedemptionReceipt
from ...services import redemption_service
from ...services.identity_service import AuthContext
from ..deps import require_admin, rule_violation, store_failure

router = APIRouter(prefix="/redemptions", tags=["redemptions"])


@router.post(
    "",
    response_model=RedemptionReceipt,
    status_code=status.HTTP_201_CREATED,
    summary="Redeem points for money",
    responses={
        201: {
            "description": "Redemption completed",
            "content": {
                "application/json": {
                    "example": {
                        "redemption": {
                            "id": "88888888-8888-8888-8888-888888888888",
                            "profile": {
                                "user_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
                                "student_id": "6401234",
                                "name": "Somchai K.",
                            },
                            "rate_id": 3,
                            "points_redeemed": 40,
                            "money_amount": "5.0000",
                            "redeemed_at": "2025-11-12T14:30:00",
                        },
                        "available_balance": 60,
                    }
                }
            },
        },
        400: {"description": "Below minimum unit, unaligned or insufficient balance"},
        403: {"description": "Administrators only"},
        404: {"description": "Profile not found"},
        409: {"description": "No active rate configured"},
    },
)
def redeem_points(
    payload: RedemptionCreate,
    context: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> RedemptionReceipt:
    """Convert a student's points into money at the active rate.

    Example request body::

        {
            "user_id": "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb",
            "points": 40
        }
    """

    try:
        redemption, remaining_balance = redemption_service.redeem(
            db,
            user_id=payload.user_id,
            quantity=payload.points,
            processed_by=context.user_id,
        )
        db.commit()
        db.refresh(redemption)
        return RedemptionReceipt(
            redemption=RedemptionRead.model_validate(redemption),
            available_balance=remaining_balance,
        )
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.get("", response_model=List[RedemptionRead], summary="Recent redemptions")
def list_redemptions(
    user_id: Optional[UUID] = Query(None, description="Filter by profile UUID"),
    limit: int = Query(50, ge=1, le=200, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[RedemptionRead]:
    try:
        return list(redemption_service.list_redemptions(db, user_id=user_id, limit=limit, offset=offset))
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc
