"""Named locations with globally unique slugs."""

from importlib import import_module
from typing import Any

__all__ = [
    "CreateResult",
    "CreateStatus",
    "DuplicateLocationName",
    "Location",
    "LocationService",
]


def __getattr__(name: str) -> Any:  # pragma: no cover - lazy import indirection
    if name in {"CreateResult", "CreateStatus", "DuplicateLocationName", "LocationService"}:
        module = import_module(".service", __name__)
        return getattr(module, name)
    if name == "Location":
        module = import_module(".models", __name__)
        return getattr(module, name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
