"""Client session state.

The session is the single owner of the active billboard code, the current
FlagSet and the form selection. The sync agent replaces ``flags``; the
reconciler and request builders only read it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import time

from billboard_service.features.flags.schemas import EvaluationContext, FlagSet

from .models import DEFAULT_CONTENT_TYPE, PostType, Theme


def now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class ClientSession:
    """Mutable client state shared by the sync agent, reconciler and board."""

    billboard_code: str | None = None
    flags: FlagSet = field(default_factory=FlagSet.defaults)
    content_type: PostType = DEFAULT_CONTENT_TYPE
    theme: Theme = Theme.LIGHT

    @property
    def authenticated(self) -> bool:
        return self.billboard_code is not None

    def build_context(self, timestamp: int | None = None) -> EvaluationContext:
        """Evaluation context for the active code (anonymous when signed out)."""
        return EvaluationContext.for_code(
            self.billboard_code,
            timestamp=now_ms() if timestamp is None else timestamp,
        )
