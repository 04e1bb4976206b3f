"""Flag snapshot service.

Evaluates the whole recognized vocabulary for one context. This is the only
place the server enumerates flag names.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from billboard_service.core.exceptions import ConflictException, FlagProviderError
from billboard_service.infra.flags import WritableFlagProvider
from billboard_service.infra.metrics.prometheus import (
    flag_evaluation_failures_total,
    flag_track_events_total,
)

from .models import FLAG_LABELS, FlagName
from .schemas import EvaluationContext, FlagDefinition, FlagSet, FlagVocabularyResponse

if TYPE_CHECKING:
    from billboard_service.infra.flags import FlagProvider

logger = logging.getLogger(__name__)


class FlagSnapshotService:
    """Turns single-flag provider evaluations into complete FlagSets.

    ``snapshot`` never raises. When any evaluation fails the whole result is
    the default FlagSet, never a partial mix of evaluated and default values.

    Example:
        service = FlagSnapshotService(provider)
        flags = service.snapshot(EvaluationContext.for_code("4821"))
        if flags.enable_image_uploads:
            ...
    """

    def __init__(self, provider: FlagProvider) -> None:
        self._provider = provider

    @property
    def provider(self) -> FlagProvider:
        return self._provider

    def snapshot(self, context: EvaluationContext | None = None) -> FlagSet:
        """Evaluate every recognized flag for ``context``.

        Args:
            context: Requester identity. None means the canonical anonymous
                context.

        Returns:
            A FlagSet with every recognized name present.
        """
        ctx = context or EvaluationContext.default()
        try:
            values: dict[FlagName, bool] = {}
            for name in FlagName:
                value = self._provider.evaluate(name.value, ctx, name.default)
                if not isinstance(value, bool):
                    msg = f"Provider returned {type(value).__name__} for a boolean flag"
                    raise FlagProviderError(msg, flag_key=name.value)
                values[name] = value
            return FlagSet.from_values(values)
        except Exception as e:
            flag_evaluation_failures_total.inc()
            logger.warning(
                "Flag evaluation failed, answering with defaults",
                extra={
                    "context_key": ctx.key,
                    "flag": getattr(e, "flag_key", None),
                    "error": str(e),
                    "error_type": type(e).__name__,
                },
            )
            return FlagSet.defaults()

    def track(self, event_name: str, context: EvaluationContext | None = None) -> bool:
        """Forward an analytics event. Returns False instead of raising."""
        ctx = context or EvaluationContext.default()
        try:
            self._provider.track(event_name, ctx)
        except Exception as e:
            flag_track_events_total.labels(outcome="failed").inc()
            logger.warning(
                "Event tracking failed",
                extra={"event_name": event_name, "context_key": ctx.key, "error": str(e)},
            )
            return False
        flag_track_events_total.labels(outcome="tracked").inc()
        return True

    def set_flag(self, name: FlagName, value: bool) -> bool:
        """Write a flag on a writable provider.

        The provider's own update notification drives the relay broadcast.

        Returns:
            True if the value changed.

        Raises:
            ConflictException: If the provider is read-only.
        """
        if not isinstance(self._provider, WritableFlagProvider):
            raise ConflictException(
                detail="The active flag provider is read-only",
                type="provider-read-only",
                extra={"flag": name.value},
            )
        return self._provider.set_flag(name.value, value)

    @staticmethod
    def vocabulary() -> FlagVocabularyResponse:
        return FlagVocabularyResponse(
            flags=[
                FlagDefinition(name=name, default=name.default, label=FLAG_LABELS.get(name))
                for name in FlagName
            ],
        )


__all__ = ["FlagSnapshotService"]
