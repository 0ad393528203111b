from __future__ import annotations

"""Failure modes of slug allocation."""


class SlugError(Exception):
    """Base class for slug allocation failures."""


class InvalidSlug(SlugError, ValueError):
    def __init__(self, value: str) -> None:
        super().__init__(f"'{value}' is not a valid slug (expected lowercase letters, digits and single hyphens)")
        self.value = value


class ResolutionExhausted(SlugError):
    """No free candidate was found within the attempt budget."""

    def __init__(self, base: str, attempts: int) -> None:
        super().__init__(f"No available slug for '{base}' after {attempts} suffixed attempt(s)")
        self.base = base
        self.attempts = attempts


class StoreUnavailable(SlugError):
    """The backing store failed while checking or inserting a slug.

    The original database error is kept as ``__cause__``.
    """


class SlugConflictError(SlugError):
    """The store's uniqueness constraint rejected the slug at insert time."""

    def __init__(self, slug: str) -> None:
        super().__init__(f"Slug '{slug}' was taken before it could be inserted")
        self.slug = slug
