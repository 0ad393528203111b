from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, status
from sqlmodel import Session, select

from ..utils.logging import get_logger
from .models import User
from .schemas import UserCreate
from .security import get_password_hash, verify_password

logger = get_logger(__name__)


class UserService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def get_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(select(User).where(User.email == email.lower())).first()

    def create_user(self, payload: UserCreate) -> User:
        if self.get_by_email(payload.email):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

        user = User(
            email=payload.email.lower(),
            full_name=payload.full_name,
            hashed_password=get_password_hash(payload.password),
        )
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        logger.info("Created user %s", user.email)
        return user

    def authenticate_user(self, email: str, password: str) -> User:
        user = self.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Incorrect email or password")
        if not user.is_active:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
        return user
