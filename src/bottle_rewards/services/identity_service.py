"""Sign-up, sign-in and the per-request auth context."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..core.config import get_settings
from ..core.errors import AuthenticationFailed, DuplicateEmail, DuplicateStudentId, InvalidPassword
from ..core.security import create_access_token, decode_token, hash_password, verify_password
from ..models import Profile
from .profile_service import find_by_email, find_by_student_id

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller, passed explicitly to handlers that need it."""

    user_id: UUID
    student_id: str
    is_admin: bool


@dataclass(frozen=True)
class AuthSession:
    access_token: str
    profile: Profile
    is_admin: bool


def _validate_password(password: str) -> None:
    minimum = get_settings().min_password_length
    if len(password) < minimum:
        raise InvalidPassword(f"Password must be at least {minimum} characters.")


def is_admin_login(login_id: str) -> bool:
    return login_id.upper().startswith(get_settings().admin_login_prefix.upper())


def sign_up(
    session: Session,
    *,
    student_id: str,
    name: str,
    email: str,
    password: str,
) -> Profile:
    """Register a student with a zero balance."""

    student_id = student_id.strip()
    if is_admin_login(student_id):
        raise DuplicateStudentId("This id is reserved.")
    if find_by_student_id(session, student_id) is not None:
        raise DuplicateStudentId()
    if find_by_email(session, email) is not None:
        raise DuplicateEmail()
    _validate_password(password)

    profile = Profile(
        student_id=student_id,
        name=name.strip(),
        email=email,
        password_hash=hash_password(password),
        is_admin=False,
        points=0,
    )
    session.add(profile)
    session.flush()
    session.refresh(profile)
    logger.info("registered student %s as %s", student_id, profile.user_id)
    return profile


def sign_in(session: Session, *, login_id: str, password: str) -> AuthSession:
    """Authenticate by student id (or admin id) and password."""

    login_id = login_id.strip()
    profile = find_by_student_id(session, login_id)
    admin_login = is_admin_login(login_id)

    if profile is None or not verify_password(password, profile.password_hash):
        logger.warning("sign-in rejected for %s", login_id)
        if admin_login:
            raise AuthenticationFailed("Invalid admin id or password.")
        raise AuthenticationFailed("Invalid student id or password.")
    if admin_login and not profile.is_admin:
        logger.warning("sign-in rejected for %s: not an administrator", login_id)
        raise AuthenticationFailed("Invalid admin id or password.")

    token = create_access_token(
        {"sub": str(profile.user_id), "sid": profile.student_id, "adm": bool(profile.is_admin)}
    )
    logger.info("user %s signed in", profile.user_id)
    return AuthSession(access_token=token, profile=profile, is_admin=bool(profile.is_admin))


def sign_out(context: AuthContext) -> None:
    # Tokens are stateless; the client discards its copy.
    logger.info("user %s signed out", context.user_id)


def context_from_token(session: Session, token: str) -> AuthContext:
    """Decode a bearer token and confirm the account still exists."""

    payload = decode_token(token)
    try:
        user_id = UUID(str(payload.get("sub")))
    except ValueError as exc:
        raise AuthenticationFailed("Invalid or expired access token.") from exc

    profile = session.get(Profile, user_id)
    if profile is None:
        raise AuthenticationFailed("Account no longer exists.")
    return AuthContext(user_id=profile.user_id, student_id=profile.student_id, is_admin=bool(profile.is_admin))


def ensure_admin(
    session: Session,
    *,
    login_id: str,
    password: str,
    name: str,
    email: str,
) -> Optional[Profile]:
    """Create the bootstrap administrator if it does not exist yet."""

    if not is_admin_login(login_id):
        raise ValueError(f"Admin login ids must start with {get_settings().admin_login_prefix}.")
    if find_by_student_id(session, login_id) is not None:
        return None
    _validate_password(password)

    admin = Profile(
        student_id=login_id,
        name=name,
        email=email,
        password_hash=hash_password(password),
        is_admin=True,
        points=0,
    )
    session.add(admin)
    session.flush()
    logger.info("bootstrap administrator %s created", login_id)
    return admin
