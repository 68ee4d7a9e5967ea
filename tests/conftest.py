"""Shared fixtures: an in-memory SQLite database and a FastAPI test client."""

import os

os.environ.setdefault("BOTTLE_REWARDS_DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("BOTTLE_REWARDS_SEED_DEFAULT_RATE", "false")
os.environ.setdefault("BOTTLE_REWARDS_JWT_SECRET_KEY", "test-secret-for-the-suite")

from decimal import Decimal
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from bottle_rewards.core.database import Base, get_db
from bottle_rewards.core.security import hash_password
from bottle_rewards.models import ExchangeRate, Profile
from bottle_rewards.services import rate_service

DEFAULT_PASSWORD = "recycle123"


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=eng)
    yield eng
    Base.metadata.drop_all(bind=eng)
    eng.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(autouse=True)
def _reset_rate_cache():
    rate_service.active_rate_cache.invalidate()
    yield
    rate_service.active_rate_cache.invalidate()


@pytest.fixture
def make_profile(db_session) -> Callable[..., Profile]:
    """Insert a profile directly, bypassing sign-up."""

    counter = {"n": 0}

    def _make(points: int = 0, *, is_admin: bool = False, student_id: str | None = None) -> Profile:
        counter["n"] += 1
        sid = student_id or (f"ADMIN{counter['n']:03d}" if is_admin else f"64000{counter['n']:02d}")
        profile = Profile(
            student_id=sid,
            name=f"User {sid}",
            email=f"{sid.lower()}@university.ac.th",
            password_hash=hash_password(DEFAULT_PASSWORD),
            is_admin=is_admin,
            points=points,
        )
        db_session.add(profile)
        db_session.commit()
        db_session.refresh(profile)
        return profile

    return _make


@pytest.fixture
def make_rate(db_session) -> Callable[..., ExchangeRate]:
    def _make(bottles_per_unit: int = 40, money_per_unit: str = "5") -> ExchangeRate:
        rate = rate_service.set_active_rate(
            db_session,
            bottles_per_unit=bottles_per_unit,
            money_per_unit=Decimal(money_per_unit),
        )
        db_session.commit()
        return rate

    return _make


@pytest.fixture
def client(session_factory) -> Iterator[TestClient]:
    from bottle_rewards.main import app

    def _override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def sign_in(client) -> Callable[[str, str], dict]:
    """Return bearer headers for a login id."""

    def _sign_in(login_id: str, password: str = DEFAULT_PASSWORD) -> dict:
        response = client.post("/api/v1/auth/sign-in", json={"login_id": login_id, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _sign_in
