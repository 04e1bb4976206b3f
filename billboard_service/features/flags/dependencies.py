"""Flag dependencies for FastAPI."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from billboard_service.core.exceptions import AppException
from billboard_service.core.settings import get_flag_settings
from billboard_service.core.settings.flags import FlagSettings

from .service import FlagSnapshotService


def get_optional_snapshot_service(request: Request) -> FlagSnapshotService | None:
    """Snapshot service stored on app state by the lifespan, if it ran."""
    return getattr(request.app.state, "flag_service", None)


def get_snapshot_service(
    service: Annotated[FlagSnapshotService | None, Depends(get_optional_snapshot_service)],
) -> FlagSnapshotService:
    if service is None:
        raise AppException(
            status_code=503,
            detail="Flag service is not initialized",
            type="flag-service-unavailable",
        )
    return service


SnapshotServiceDep = Annotated[FlagSnapshotService, Depends(get_snapshot_service)]
OptionalSnapshotServiceDep = Annotated[
    FlagSnapshotService | None,
    Depends(get_optional_snapshot_service),
]
FlagSettingsDep = Annotated[FlagSettings, Depends(get_flag_settings)]

__all__ = [
    "FlagSettingsDep",
    "OptionalSnapshotServiceDep",
    "SnapshotServiceDep",
    "get_optional_snapshot_service",
    "get_snapshot_service",
]
