"""Accounts and bearer-token authentication for Locus."""

from . import models, router, security, service  # noqa: F401

__all__ = [
    "models",
    "router",
    "security",
    "service",
]
