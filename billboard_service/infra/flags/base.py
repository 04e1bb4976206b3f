"""Flag provider protocols.

A provider evaluates single flags for a context and reports which flag keys
changed. The snapshot service and the realtime bridge depend only on these
protocols, never on a concrete SDK.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from billboard_service.features.flags.schemas import EvaluationContext

# Receives the changed flag key. May run on a provider-owned thread.
UpdateCallback = Callable[[str], None]


@runtime_checkable
class FlagProvider(Protocol):
    """Protocol for flag evaluation backends."""

    def evaluate(self, flag_key: str, context: EvaluationContext, default: bool) -> bool:
        """Evaluate one flag.

        Args:
            flag_key: Provider-side flag key.
            context: Requester identity.
            default: Value the provider should fall back to.

        Returns:
            The evaluated value.

        Raises:
            FlagProviderError: If the backend cannot evaluate the flag.
        """
        ...

    def on_update(self, callback: UpdateCallback) -> None:
        """Register a callback invoked with the key of every changed flag."""
        ...

    def track(self, event_name: str, context: EvaluationContext) -> None:
        """Forward a custom analytics event."""
        ...

    def close(self) -> None:
        """Release backend resources."""
        ...


@runtime_checkable
class WritableFlagProvider(FlagProvider, Protocol):
    """Provider whose values can be changed locally (development, tests)."""

    def set_flag(self, flag_key: str, value: bool) -> bool:
        """Set a flag value.

        Returns:
            True if the stored value changed.
        """
        ...


__all__ = ["FlagProvider", "UpdateCallback", "WritableFlagProvider"]
