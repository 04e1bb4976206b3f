"""Recognized flag vocabulary.

The UI may branch only on the names enumerated here. Adding a flag means adding
a member to ``FlagName`` plus an entry in ``FLAG_DEFAULTS`` and ``FLAG_LABELS``.
"""

from __future__ import annotations

from enum import StrEnum
import re


class FlagName(StrEnum):
    """Flag keys as the provider knows them."""

    ENABLE_IMAGE_UPLOADS = "enable-image-uploads"
    THEME_SELECTION = "theme-selection"
    SHOW_FEATURE_FLAG_INFO = "show-feature-flag-info"

    @property
    def default(self) -> bool:
        """Value used when evaluation fails or the provider is unavailable."""
        return FLAG_DEFAULTS[self]

    @property
    def attribute(self) -> str:
        """Python attribute name on ``FlagSet``."""
        return self.value.replace("-", "_")

    @classmethod
    def parse(cls, name: str) -> FlagName | None:
        """Return the member for ``name`` or None when it is not recognized."""
        try:
            return cls(name)
        except ValueError:
            return None


FLAG_DEFAULTS: dict[FlagName, bool] = {
    FlagName.ENABLE_IMAGE_UPLOADS: False,
    FlagName.THEME_SELECTION: False,
    FlagName.SHOW_FEATURE_FLAG_INFO: True,
}

# Status line labels; show-feature-flag-info controls the panel itself.
FLAG_LABELS: dict[FlagName, str] = {
    FlagName.ENABLE_IMAGE_UPLOADS: "Image Uploads",
    FlagName.THEME_SELECTION: "Theme Selection",
}

# Context key for evaluations that carry no requester (server side).
DEFAULT_CONTEXT_KEY = "anonymous-user"

# Context key a client sends while no billboard code is active.
ANONYMOUS_CLIENT_KEY = "anonymous"

BILLBOARD_CODE_PATTERN = re.compile(r"^[0-9]{4}$")

__all__ = [
    "ANONYMOUS_CLIENT_KEY",
    "BILLBOARD_CODE_PATTERN",
    "DEFAULT_CONTEXT_KEY",
    "FLAG_DEFAULTS",
    "FLAG_LABELS",
    "FlagName",
]
