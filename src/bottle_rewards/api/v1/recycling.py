"""Recycling submission endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import RewardsError
from ...schemas import RecyclingCreate, RecyclingEntryRead, RecyclingStatsRead
from ...services import recycling_service
from ...services.identity_service import AuthContext
from ..deps import get_auth_context, require_admin, rule_violation, store_failure

router = APIRouter(prefix="/recycling", tags=["recycling"])


@router.post(
    "",
    response_model=RecyclingEntryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Submit recycled bottles",
    responses={
        201: {
            "description": "Submission recorded and points credited",
            "content": {
                "application/json": {
                    "example": {
                        "id": "44444444-4444-4444-4444-444444444444",
                        "user_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
                        "rate_id": 3,
                        "date": "2025-11-12T10:15:30",
                        "bottles": 40,
                        "money_received": "5.0000",
                    }
                }
            },
        },
        400: {"description": "Invalid quantity"},
        409: {"description": "No active rate configured"},
    },
)
def submit_recycling(
    payload: RecyclingCreate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> RecyclingEntryRead:
    """Credit bottles to the caller's balance.

    Example request body::

        {
            "bottles": 40
        }
    """

    try:
        entry = recycling_service.submit_bottles(db, user_id=context.user_id, quantity=payload.bottles)
        db.commit()
        db.refresh(entry)
        return entry
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.get("", response_model=List[RecyclingEntryRead], summary="Own recycling history")
def list_my_history(
    limit: int = Query(100, ge=1, le=500, description="Maximum items to return"),
    offset: int = Query(0, ge=0, description="Items to skip for pagination"),
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> List[RecyclingEntryRead]:
    try:
        return list(recycling_service.list_history(db, user_id=context.user_id, limit=limit, offset=offset))
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.get(
    "/stats",
    response_model=List[RecyclingStatsRead],
    summary="Recycling totals per student",
    responses={403: {"description": "Administrators only"}},
)
def recycling_stats(
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[RecyclingStatsRead]:
    try:
        return recycling_service.recycling_stats(db)
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc
