from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlmodel import Session

from ..config import Settings, get_settings
from .database import get_session
from .models import User
from .schemas import Token, UserCreate, UserRead
from .security import create_access_token, get_active_owner
from .service import UserService


router = APIRouter()


@router.post("/register", response_model=UserRead)
def register_user(payload: UserCreate, session: Session = Depends(get_session)) -> UserRead:
    user = UserService(session).create_user(payload)
    return UserRead.model_validate(user)


@router.post("/token", response_model=Token)
def login_for_access_token(
    form_data: OAuth2PasswordRequestForm = Depends(),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
) -> Token:
    user = UserService(session).authenticate_user(form_data.username, form_data.password)
    return Token(access_token=create_access_token(user, settings))


@router.get("/me", response_model=UserRead)
def read_current_user(current_user: User = Depends(get_active_owner)) -> UserRead:
    return UserRead.model_validate(current_user)
