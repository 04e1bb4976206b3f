"""Flag REST API endpoints.

``/flags`` and ``/track`` always answer with a success status; provider
problems show up as default values or ``success: false``.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Body

from billboard_service.core.exceptions import ConflictException, NotFoundException

from .dependencies import FlagSettingsDep, OptionalSnapshotServiceDep, SnapshotServiceDep
from .models import FlagName
from .schemas import (
    FlagSet,
    FlagsRequest,
    FlagVocabularyResponse,
    FlagWriteRequest,
    TrackRequest,
    TrackResponse,
)
from .service import FlagSnapshotService

router = APIRouter(tags=["flags"])


@router.post(
    "/flags",
    response_model=FlagSet,
    response_model_by_alias=True,
    summary="Evaluate flags",
    description="Evaluate every recognized flag for the given context.",
)
async def evaluate_flags(
    service: OptionalSnapshotServiceDep,
    body: Annotated[FlagsRequest | None, Body()] = None,
) -> FlagSet:
    """Return the full FlagSet for the request context.

    A missing body or null context evaluates against the anonymous context.
    """
    if service is None:
        return FlagSet.defaults()
    return service.snapshot(body.context if body else None)


@router.post(
    "/track",
    response_model=TrackResponse,
    summary="Track event",
    description="Forward a custom analytics event to the flag provider.",
)
async def track_event(body: TrackRequest, service: OptionalSnapshotServiceDep) -> TrackResponse:
    if service is None:
        return TrackResponse(success=False)
    return TrackResponse(success=service.track(body.event_name, body.context))


@router.get(
    "/flags/vocabulary",
    response_model=FlagVocabularyResponse,
    summary="List recognized flags",
)
async def flag_vocabulary() -> FlagVocabularyResponse:
    return FlagSnapshotService.vocabulary()


@router.put(
    "/flags/{name}",
    response_model=FlagSet,
    response_model_by_alias=True,
    summary="Set flag",
    description="Set a flag on a writable provider. Connected channels receive the new snapshot.",
)
async def set_flag(
    name: str,
    body: FlagWriteRequest,
    service: SnapshotServiceDep,
    settings: FlagSettingsDep,
) -> FlagSet:
    """Write one flag and return the default-context snapshot.

    Raises:
        NotFoundException: If ``name`` is not a recognized flag.
        ConflictException: If admin writes are disabled or the provider is read-only.
    """
    flag = FlagName.parse(name)
    if flag is None:
        raise NotFoundException(
            detail=f"Flag '{name}' is not recognized",
            type="flag-not-found",
            extra={"flag": name},
        )
    if not settings.admin_enabled:
        raise ConflictException(
            detail="Flag writes are disabled",
            type="flag-writes-disabled",
            extra={"flag": name},
        )
    service.set_flag(flag, body.value)
    return service.snapshot(None)
