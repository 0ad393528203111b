from __future__ import annotations

import string
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_SLUG_ALPHABET = frozenset(string.ascii_lowercase + string.digits)


class Settings(BaseSettings):
    """Central application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistence
    database_url: str = Field(
        default="sqlite:///./locus.db",
        description="SQL database URL for users and locations",
    )

    # Authentication
    jwt_secret_key: str = Field(
        default="change-this-secret",
        description="Signing key for JSON web tokens",
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    access_token_expire_minutes: int = Field(
        default=60,
        description="Minutes before issued access tokens expire",
    )

    # Slug allocation
    slug_max_attempts: int = Field(
        default=10,
        description="Suffixed candidates checked before giving up on a base slug",
    )
    slug_suffix_length: int = Field(default=5, description="Length of the random disambiguation suffix")
    slug_suffix_alphabet: str = Field(
        default=string.ascii_lowercase + string.digits,
        description="Characters the disambiguation suffix is drawn from",
    )
    slug_max_length: int = Field(default=80, description="Maximum length of a base slug derived from a name")
    slug_conflict_retries: int = Field(
        default=0,
        description=(
            "Extra resolve-and-insert rounds after the database rejects a slug at insert time. "
            "Zero reports the conflict to the caller straight away."
        ),
    )

    log_level: str = Field(default="INFO", description="Root logging level")

    @field_validator("slug_max_attempts", "slug_suffix_length", "slug_max_length")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    @field_validator("slug_conflict_retries")
    @classmethod
    def _non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("must not be negative")
        return value

    @field_validator("slug_suffix_alphabet")
    @classmethod
    def _slug_safe_alphabet(cls, value: str) -> str:
        if not value:
            raise ValueError("SLUG_SUFFIX_ALPHABET must not be empty")
        invalid = set(value) - _SLUG_ALPHABET
        if invalid:
            raise ValueError(f"SLUG_SUFFIX_ALPHABET contains characters outside [a-z0-9]: {''.join(sorted(invalid))}")
        return value


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache Settings."""

    return Settings()
