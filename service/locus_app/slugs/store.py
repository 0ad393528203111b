from __future__ import annotations

"""Store adapters the slug resolver and its callers talk to."""

import threading
from typing import Any, Iterable, List, Optional, Protocol, Type, TypeVar

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from ..utils.logging import get_logger
from .errors import SlugConflictError, StoreUnavailable

logger = get_logger(__name__)

RecordT = TypeVar("RecordT")


class SlugLookup(Protocol):
    def exists(self, slug: str) -> bool:
        ...


class SlugStore(SlugLookup, Protocol):
    def insert(self, record: RecordT) -> RecordT:
        ...


class SQLModelSlugStore:
    """Slug store backed by a SQLModel table with a unique slug column.

    ``insert`` raises :class:`SlugConflictError` only when the database rejects
    the row because of ``constraint``; other integrity errors propagate.
    """

    def __init__(
        self,
        session: Session,
        model: Type[SQLModel],
        *,
        column: str = "slug",
        constraint: Optional[str] = None,
    ) -> None:
        self.session = session
        self.model = model
        self.column_name = column
        self.column = getattr(model, column)
        self.constraint = constraint

    def exists(self, slug: str) -> bool:
        statement = select(self.column).where(self.column == slug).limit(1)
        try:
            return self.session.exec(statement).first() is not None
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Slug lookup for '{slug}' failed: {exc}") from exc

    def insert(self, record: RecordT) -> RecordT:
        slug = getattr(record, self.column_name)
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if self.is_slug_violation(exc):
                logger.info("Insert of slug '%s' lost to a concurrent writer", slug)
                raise SlugConflictError(slug) from exc
            raise
        except (OperationalError, InterfaceError) as exc:
            self.session.rollback()
            raise StoreUnavailable(f"Insert of slug '{slug}' failed: {exc}") from exc
        except SQLAlchemyError:
            self.session.rollback()
            raise
        self.session.refresh(record)
        return record

    def is_slug_violation(self, exc: IntegrityError) -> bool:
        original = exc.orig
        diag = getattr(original, "diag", None)
        if self.constraint and getattr(diag, "constraint_name", None) == self.constraint:
            return True
        message = str(original)
        if self.constraint and self.constraint in message:
            return True
        # SQLite reports columns rather than constraint names
        return f"{self.model.__tablename__}.{self.column_name}" in message


class InMemorySlugStore:
    """Set-backed store, used by tests and dry runs."""

    def __init__(self, slugs: Iterable[str] = ()) -> None:
        self.slugs = set(slugs)
        self.lookups: List[str] = []
        self._lock = threading.Lock()

    def exists(self, slug: str) -> bool:
        self.lookups.append(slug)
        return slug in self.slugs

    def insert(self, record: Any) -> Any:
        slug = record if isinstance(record, str) else getattr(record, "slug")
        with self._lock:
            if slug in self.slugs:
                raise SlugConflictError(slug)
            self.slugs.add(slug)
        return record
