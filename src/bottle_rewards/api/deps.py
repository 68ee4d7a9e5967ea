"""Shared request dependencies and error translation for the routers."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.database import get_db
from ..core.errors import AuthenticationFailed, Forbidden, RewardsError, StoreUnavailable
from ..services.identity_service import AuthContext, context_from_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Resolve the caller from the bearer token."""

    if credentials is None or not credentials.credentials:
        raise AuthenticationFailed("Sign in required.").to_http()
    try:
        return context_from_token(db, credentials.credentials)
    except RewardsError as exc:
        raise exc.to_http() from exc
    except SQLAlchemyError as exc:
        raise store_failure(db, exc) from exc


def require_admin(context: AuthContext = Depends(get_auth_context)) -> AuthContext:
    if not context.is_admin:
        raise Forbidden().to_http()
    return context


def store_failure(db: Session, exc: SQLAlchemyError) -> HTTPException:
    """Roll back and describe a data store failure as a retryable 503."""

    logger.exception("data store failure: %s", exc.__class__.__name__)
    try:
        db.rollback()
    except SQLAlchemyError:
        logger.warning("rollback after store failure also failed", exc_info=True)
    return StoreUnavailable().to_http()


def rule_violation(db: Session, exc: RewardsError) -> HTTPException:
    db.rollback()
    return exc.to_http()
