"""Authentication, session resolution and role checks."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..config import MissingSecretError, get_settings, require_jwt_secret
from ..constants import SELECTABLE_ROLES
from ..database import get_session
from ..models import User
from ..schemas import RegisterRequest

logger = logging.getLogger(__name__)

_security = HTTPBearer(auto_error=False)
_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def _jwt_secret() -> str:
    try:
        return require_jwt_secret()
    except MissingSecretError as exc:
        raise RuntimeError(str(exc)) from exc


def hash_password(password: str) -> str:
    """Hash a plain-text password using bcrypt."""

    return _pwd_context.hash(password)


def verify_password(password: str, hashed_password: str) -> bool:
    """Verify that ``password`` matches ``hashed_password``."""

    try:
        return _pwd_context.verify(password, hashed_password)
    except ValueError:
        # Unknown or malformed hash formats (e.g. seeded fixtures).
        return False


def create_access_token(subject: UUID, *, expires_minutes: Optional[int] = None) -> str:
    """Create a signed JWT holding the provided ``subject``."""

    settings = get_settings()
    expire_delta = timedelta(minutes=expires_minutes or settings.jwt_expires_minutes)
    now = datetime.now(timezone.utc)
    payload = {"sub": str(subject), "exp": now + expire_delta, "iat": now}
    return jwt.encode(payload, _jwt_secret(), algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> UUID:
    """Decode and validate a JWT, returning the embedded subject UUID."""

    try:
        payload = jwt.decode(token, _jwt_secret(), algorithms=[get_settings().jwt_algorithm])
    except JWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc

    subject = payload.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    try:
        return UUID(subject)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload") from exc


def register_user(db: Session, payload: RegisterRequest) -> Tuple[User, str]:
    """Persist a new user and return the user with an access token."""

    if db.scalar(select(User).where(User.username == payload.username)):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Username already in use")

    if payload.email and db.scalar(select(User).where(User.email == str(payload.email))):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Email already registered")

    user = User(
        username=payload.username,
        email=str(payload.email) if payload.email else None,
        display_name=(payload.display_name or "").strip() or None,
        hashed_password=hash_password(payload.password),
    )

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Failed to register user")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to register user") from exc

    return user, create_access_token(user.id)


def authenticate_user(db: Session, username: str, password: str) -> Optional[User]:
    """Authenticate a user against stored credentials."""

    user = db.scalar(select(User).where(User.username == username))
    if not user or not verify_password(password, user.hashed_password):
        return None
    return user


def select_role(db: Session, *, user: User, role: str) -> User:
    """Let a user pick their account type; ``admin`` is never self-assigned."""

    if role not in SELECTABLE_ROLES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Role cannot be selected")
    if user.role == "admin":
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Admin accounts cannot change role")

    user.role = role
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Unable to update role") from exc
    db.refresh(user)
    return user


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(_security),
    db: Session = Depends(get_session),
) -> User:
    """Resolve the authenticated user from the provided bearer token."""

    if not credentials or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    user = db.get(User, decode_access_token(credentials.credentials))
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(_security),
    db: Session = Depends(get_session),
) -> User | None:
    """Return the authenticated user when a bearer token is provided."""

    if not credentials or credentials.scheme.lower() != "bearer":
        return None

    try:
        user_id = decode_access_token(credentials.credentials)
    except HTTPException:
        return None

    return db.get(User, user_id)


def require_roles(*allowed_roles: str):
    normalized = {role.lower() for role in allowed_roles if role}

    async def _resolver(user: User = Depends(get_current_user)) -> User:
        role = (getattr(user, "role", None) or "user").lower()
        if normalized and role not in normalized:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return user

    return _resolver


def require_admin():
    return require_roles("admin")


def is_admin(user: User | None) -> bool:
    return user is not None and (user.role or "").lower() == "admin"


__all__ = [
    "register_user",
    "authenticate_user",
    "select_role",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "get_current_user",
    "get_optional_user",
    "require_roles",
    "require_admin",
    "is_admin",
]
