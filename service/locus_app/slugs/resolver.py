from __future__ import annotations

"""Resolve a base slug into one that is free in a store."""

from functools import partial
from typing import Callable, Optional

from ..utils.logging import get_logger
from ..utils.text import SLUG_ALPHABET, is_valid_slug, random_suffix
from .errors import InvalidSlug, ResolutionExhausted
from .store import SlugLookup

logger = get_logger(__name__)

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_SUFFIX_LENGTH = 5


class SlugResolver:
    """Find an unused slug by probing ``store`` and appending random suffixes.

    The resolver only ever calls ``store.exists``. A returned slug is free as
    of the last lookup; the insert that follows is still the final authority.
    """

    def __init__(
        self,
        store: SlugLookup,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        suffix_length: int = DEFAULT_SUFFIX_LENGTH,
        alphabet: str = SLUG_ALPHABET,
        suffix_factory: Optional[Callable[[], str]] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if not alphabet or set(alphabet) - set(SLUG_ALPHABET):
            raise ValueError(f"suffix alphabet must only use [a-z0-9], got '{alphabet}'")
        self.store = store
        self.max_attempts = max_attempts
        self.suffix_factory = suffix_factory or partial(random_suffix, suffix_length, alphabet)

    def resolve(self, base: str) -> str:
        if not is_valid_slug(base):
            raise InvalidSlug(base)

        if not self.store.exists(base):
            return base

        for attempt in range(1, self.max_attempts + 1):
            candidate = f"{base}-{self.suffix_factory()}"
            if not is_valid_slug(candidate):
                raise InvalidSlug(candidate)
            if not self.store.exists(candidate):
                logger.info("Slug '%s' taken, using '%s' (attempt %d)", base, candidate, attempt)
                return candidate
            logger.debug("Candidate '%s' also taken (attempt %d/%d)", candidate, attempt, self.max_attempts)

        logger.warning("Gave up resolving slug '%s' after %d attempts", base, self.max_attempts)
        raise ResolutionExhausted(base, self.max_attempts)


def resolve_unique_identifier(store: SlugLookup, base: str, **options) -> str:
    """Return ``base`` or a suffixed variant of it that ``store`` does not hold."""

    return SlugResolver(store, **options).resolve(base)
