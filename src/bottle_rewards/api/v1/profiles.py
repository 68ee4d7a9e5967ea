"""Profile endpoints."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import RewardsError
from ...models import Profile
from ...schemas import ProfileAdminRead, ProfileRead, ProfileUpdate
from ...services import profile_service
from ...services.identity_service import AuthContext
from ..deps import get_auth_context, require_admin, rule_violation, store_failure

router = APIRouter(prefix="/profiles", tags=["profiles"])


def build_profile_read(db: Session, profile: Profile) -> ProfileRead:
    """Project a profile and attach the money its balance is worth."""

    read = ProfileRead.model_validate(profile)
    read.redeemable_value = profile_service.redeemable_value(db, profile.points)
    return read


@router.patch(
    "/me",
    response_model=ProfileRead,
    summary="Edit own profile",
    responses={
        404: {"description": "Profile not found"},
        409: {"description": "E-mail already registered"},
    },
)
def update_my_profile(
    payload: ProfileUpdate,
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> ProfileRead:
    """Change the caller's display name and/or e-mail."""

    try:
        profile = profile_service.update_profile(
            db,
            context.user_id,
            name=payload.name,
            email=str(payload.email) if payload.email is not None else None,
        )
        db.commit()
        db.refresh(profile)
        return build_profile_read(db, profile)
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.get(
    "",
    response_model=List[ProfileAdminRead],
    summary="List student balances",
    responses={
        200: {
            "description": "Students ordered by student id",
            "content": {
                "application/json": {
                    "example": [
                        {
                            "user_id": "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa",
                            "student_id": "6401234",
                            "name": "Somchai K.",
                            "email": "6401234@university.ac.th",
                            "points": 120,
                        }
                    ]
                }
            },
        },
        403: {"description": "Administrators only"},
    },
)
def list_profiles(
    _: AuthContext = Depends(require_admin),
    db: Session = Depends(get_db),
) -> List[ProfileAdminRead]:
    try:
        return list(profile_service.list_profiles(db))
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc
