"""Flag snapshot feature.

Serves ``POST /flags`` and ``POST /track`` and owns the flag vocabulary the
rest of the system may branch on.
"""

from __future__ import annotations

from .models import FLAG_DEFAULTS, FlagName
from .schemas import EvaluationContext, FlagSet, FlagsUpdateMessage
from .service import FlagSnapshotService

__all__ = [
    "FLAG_DEFAULTS",
    "EvaluationContext",
    "FlagName",
    "FlagSet",
    "FlagSnapshotService",
    "FlagsUpdateMessage",
]
