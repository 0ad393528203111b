from __future__ import annotations

"""Password hashing and bearer tokens identifying the owner of new locations."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from passlib.context import CryptContext
from sqlmodel import Session

from ..config import Settings, get_settings
from .database import get_session
from .models import User

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(owner: User, settings: Settings, *, expires_delta: Optional[timedelta] = None) -> str:
    """Issue a token whose subject is the owner's id."""

    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims = {"sub": str(owner.id), "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def owner_id_from_token(token: str, settings: Settings) -> Optional[int]:
    """Return the owner id carried by ``token``, or None when it is bad, expired or malformed."""

    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    try:
        return int(claims["sub"])
    except (KeyError, TypeError, ValueError):
        return None


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_owner(
    token: str = Depends(oauth2_scheme),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> User:
    owner_id = owner_id_from_token(token, settings)
    owner = session.get(User, owner_id) if owner_id is not None else None
    if owner is None:
        raise _unauthorized()
    return owner


def get_active_owner(owner: User = Depends(get_current_owner)) -> User:
    if not owner.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Inactive user cannot create locations")
    return owner
