"""Start-up initialisation: schema, default rate and bootstrap admin."""

from __future__ import annotations

import logging

from fastapi import FastAPI
from sqlalchemy.orm import Session

from .core.config import get_settings
from .core.database import Base, SessionLocal, engine
from .services import identity_service, rate_service

logger = logging.getLogger(__name__)


def initialize(session: Session) -> dict[str, bool]:
    """Seed reference data. Safe to run on every start."""

    settings = get_settings()
    summary = {"rate_seeded": False, "admin_created": False}

    if settings.seed_default_rate:
        summary["rate_seeded"] = rate_service.seed_default_rate(session) is not None

    if settings.admin_login_id and settings.admin_password:
        admin = identity_service.ensure_admin(
            session,
            login_id=settings.admin_login_id,
            password=settings.admin_password,
            name=settings.admin_name,
            email=settings.admin_email,
        )
        summary["admin_created"] = admin is not None

    return summary


def register_bootstrap(app: FastAPI) -> None:
    """Attach start-up initialisation to the FastAPI app."""

    @app.on_event("startup")
    def run_bootstrap() -> None:
        Base.metadata.create_all(bind=engine)
        session = SessionLocal()
        try:
            summary = initialize(session)
            session.commit()
            logger.info("bootstrap completed: %s", summary)
        except Exception:
            session.rollback()
            logger.exception("bootstrap failed")
            raise
        finally:
            session.close()
