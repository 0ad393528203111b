from __future__ import annotations

"""FastAPI router for creating locations."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from ..auth.database import get_session
from ..auth.models import User
from ..auth.security import get_active_owner
from ..config import Settings, get_settings
from ..slugs import ResolutionExhausted, StoreUnavailable
from ..utils.logging import get_logger
from .schemas import LocationCreate, LocationRead
from .service import DuplicateLocationName, LocationService

logger = get_logger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])

SLUG_CONFLICT_MESSAGE = "Slug must be unique (the location name is used to generate the slug). Please try again."


@router.post("", response_model=LocationRead, status_code=status.HTTP_201_CREATED)
def create_location(
    payload: LocationCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_settings),
    owner: User = Depends(get_active_owner),
) -> LocationRead:
    service = LocationService(session, settings)
    try:
        result = service.create_location(payload, user_id=owner.id)
    except DuplicateLocationName as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have a location with this name.",
        ) from exc
    except ResolutionExhausted as exc:
        logger.error("%s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Could not allocate a unique slug for this name. Please try again.",
        ) from exc
    except StoreUnavailable as exc:
        logger.error("Location store unavailable: %s", exc)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Location storage is temporarily unavailable. Please try again.",
        ) from exc

    if not result.created:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=SLUG_CONFLICT_MESSAGE)
    return LocationRead.model_validate(result.location)
