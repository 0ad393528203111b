from __future__ import annotations

from contextlib import contextmanager
from typing import Dict, Iterator

from fastapi import Depends
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from ..config import Settings, get_settings
from ..utils.logging import get_logger

logger = get_logger(__name__)

_engines: Dict[str, Engine] = {}


def get_engine(settings: Settings) -> Engine:
    engine = _engines.get(settings.database_url)
    if engine is not None:
        return engine
    connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
    engine = create_engine(settings.database_url, echo=False, connect_args=connect_args)
    _engines[settings.database_url] = engine
    return engine


def init_db(settings: Settings) -> None:
    # Table classes must be imported before create_all sees them
    from ..locations import models as _location_models  # noqa: F401
    from . import models as _auth_models  # noqa: F401

    engine = get_engine(settings)
    SQLModel.metadata.create_all(engine)
    logger.info("Database schema ensured at %s", engine.url.render_as_string(hide_password=True))


@contextmanager
def session_scope(settings: Settings) -> Iterator[Session]:
    engine = get_engine(settings)
    with Session(engine) as session:
        yield session


def get_session(settings: Settings = Depends(get_settings)) -> Iterator[Session]:
    engine = get_engine(settings)
    with Session(engine) as session:
        yield session
