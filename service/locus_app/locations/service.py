from __future__ import annotations

"""Location creation: per-owner name check, slug resolution and the guarded insert."""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from ..config import Settings
from ..slugs import SlugConflictError, SlugResolver, SQLModelSlugStore, StoreUnavailable
from ..utils.logging import get_logger
from ..utils.text import slugify
from .models import SLUG_CONSTRAINT, USER_NAME_CONSTRAINT, Location
from .schemas import LocationCreate

logger = get_logger(__name__)


class CreateStatus(str, Enum):
    CREATED = "created"
    CONFLICT = "conflict"


@dataclass
class CreateResult:
    """Outcome of a creation attempt.

    ``CONFLICT`` means the database rejected the resolved slug because another
    request inserted it first. Resubmitting is safe and will very likely pick
    a different slug.
    """

    status: CreateStatus
    slug: str
    location: Optional[Location] = None

    @property
    def created(self) -> bool:
        return self.status is CreateStatus.CREATED


class DuplicateLocationName(Exception):
    def __init__(self, name: str) -> None:
        super().__init__(f"A location named '{name}' already exists for this user")
        self.name = name


class LocationService:
    def __init__(
        self,
        session: Session,
        settings: Settings,
        *,
        suffix_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        self.session = session
        self.settings = settings
        self.store = SQLModelSlugStore(session, Location, column="slug", constraint=SLUG_CONSTRAINT)
        self.resolver = SlugResolver(
            self.store,
            max_attempts=settings.slug_max_attempts,
            suffix_length=settings.slug_suffix_length,
            alphabet=settings.slug_suffix_alphabet,
            suffix_factory=suffix_factory,
        )

    def find_by_name(self, name: str, user_id: int) -> Optional[Location]:
        statement = select(Location).where(Location.name == name, Location.user_id == user_id)
        try:
            return self.session.exec(statement).first()
        except SQLAlchemyError as exc:
            raise StoreUnavailable(f"Name lookup for '{name}' failed: {exc}") from exc

    def find_by_slug(self, slug: str) -> Optional[Location]:
        return self.session.exec(select(Location).where(Location.slug == slug)).first()

    def base_slug(self, name: str) -> str:
        return slugify(name, max_length=self.settings.slug_max_length)

    def resolve_slug(self, name: str) -> str:
        """Return the slug a location called ``name`` would get right now, without inserting."""

        return self.resolver.resolve(self.base_slug(name))

    def create_location(self, payload: LocationCreate, user_id: int) -> CreateResult:
        if self.find_by_name(payload.name, user_id):
            raise DuplicateLocationName(payload.name)

        base = self.base_slug(payload.name)
        rounds = 1 + self.settings.slug_conflict_retries
        slug = base
        for round_number in range(1, rounds + 1):
            slug = self.resolver.resolve(base)
            location = Location(**payload.model_dump(), slug=slug, user_id=user_id)
            try:
                created = self.store.insert(location)
            except SlugConflictError:
                logger.warning("Slug '%s' was claimed concurrently (round %d/%d)", slug, round_number, rounds)
                continue
            except IntegrityError as exc:
                if _is_name_violation(exc):
                    raise DuplicateLocationName(payload.name) from exc
                raise
            logger.info("Created location '%s' with slug '%s' for user %s", created.name, created.slug, user_id)
            return CreateResult(status=CreateStatus.CREATED, slug=created.slug, location=created)

        return CreateResult(status=CreateStatus.CONFLICT, slug=slug)


def _is_name_violation(exc: IntegrityError) -> bool:
    message = str(exc.orig)
    return USER_NAME_CONSTRAINT in message or "locations.user_id, locations.name" in message
