"""Unique slug allocation."""

from .errors import InvalidSlug, ResolutionExhausted, SlugConflictError, SlugError, StoreUnavailable
from .resolver import SlugResolver, resolve_unique_identifier
from .store import InMemorySlugStore, SlugLookup, SlugStore, SQLModelSlugStore

__all__ = [
    "InMemorySlugStore",
    "InvalidSlug",
    "ResolutionExhausted",
    "SlugConflictError",
    "SlugError",
    "SlugLookup",
    "SlugResolver",
    "SlugStore",
    "SQLModelSlugStore",
    "StoreUnavailable",
    "resolve_unique_identifier",
]
