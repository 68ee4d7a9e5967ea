"""Sign-up, sign-in and session endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.errors import RewardsError
from ...schemas import AuthToken, ProfileRead, SignInRequest, SignUpRequest
from ...services import identity_service, profile_service
from ...services.identity_service import AuthContext
from ..deps import get_auth_context, rule_violation, store_failure
from .profiles import build_profile_read

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/sign-up",
    response_model=ProfileRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register a student",
    responses={
        400: {"description": "Password too short"},
        409: {"description": "Student id or e-mail already registered"},
    },
)
def sign_up(payload: SignUpRequest, db: Session = Depends(get_db)) -> ProfileRead:
    """Create a student account with a zero points balance.

    Example request body::

        {
            "student_id": "6401234",
            "name": "Somchai K.",
            "email": "6401234@university.ac.th",
            "password": "s3cret!"
        }
    """

    try:
        profile = identity_service.sign_up(
            db,
            student_id=payload.student_id,
            name=payload.name,
            email=str(payload.email),
            password=payload.password,
        )
        db.commit()
        db.refresh(profile)
        return build_profile_read(db, profile)
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


@router.post(
    "/sign-in",
    response_model=AuthToken,
    summary="Sign in with a student id or admin id",
    responses={401: {"description": "Invalid login id or password"}},
)
def sign_in(payload: SignInRequest, db: Session = Depends(get_db)) -> AuthToken:
    try:
        auth = identity_service.sign_in(db, login_id=payload.login_id, password=payload.password)
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc

    return AuthToken(
        access_token=auth.access_token,
        is_admin=auth.is_admin,
        profile=build_profile_read(db, auth.profile),
    )


@router.post("/sign-out", status_code=status.HTTP_204_NO_CONTENT, summary="Sign out")
def sign_out(context: AuthContext = Depends(get_auth_context)) -> Response:
    identity_service.sign_out(context)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=ProfileRead, summary="Current profile and balance")
def me(
    context: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
) -> ProfileRead:
    try:
        profile = profile_service.get_profile(db, context.user_id)
        return build_profile_read(db, profile)
    except RewardsError as exc:
        raise rule_violation(db, exc) from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc
