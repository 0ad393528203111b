from __future__ import annotations

import re
import secrets
import string

from slugify import slugify as _slugify

SLUG_ALPHABET = string.ascii_lowercase + string.digits
DEFAULT_FALLBACK = "location"

_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


def slugify(value: str, *, max_length: int = 80, fallback: str = DEFAULT_FALLBACK) -> str:
    """Turn arbitrary display text into a base slug.

    Unicode is transliterated to ASCII and anything outside ``[a-z0-9]``
    collapses into single hyphens. Input that leaves nothing behind (only
    punctuation, emoji, whitespace) yields ``fallback``.
    """

    slug = _slugify(value or "", max_length=max_length, word_boundary=True, separator="-", lowercase=True)
    slug = slug.strip("-")
    return slug or fallback


def is_valid_slug(value: str) -> bool:
    """Return True when ``value`` only uses lowercase alphanumerics separated by single hyphens."""

    return bool(value) and _SLUG_RE.match(value) is not None


def random_suffix(length: int = 5, alphabet: str = SLUG_ALPHABET) -> str:
    if length < 1:
        raise ValueError("suffix length must be at least 1")
    if not alphabet:
        raise ValueError("suffix alphabet must not be empty")
    return "".join(secrets.choice(alphabet) for _ in range(length))
