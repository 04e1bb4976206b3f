"""Flag schemas for API requests, responses and realtime messages."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import (
    ANONYMOUS_CLIENT_KEY,
    BILLBOARD_CODE_PATTERN,
    DEFAULT_CONTEXT_KEY,
    FLAG_DEFAULTS,
    FlagName,
)


class EvaluationContext(BaseModel):
    """Identity passed to flag evaluation and event tracking.

    ``anonymous`` is true exactly when no billboard code is present.
    """

    key: str = Field(min_length=1, description="Subject key")
    anonymous: bool = Field(description="True when no billboard code is active")
    billboard_code: str | None = Field(
        default=None,
        alias="billboardCode",
        pattern=BILLBOARD_CODE_PATTERN.pattern,
        description="Active 4-digit billboard code",
    )
    timestamp: int | None = Field(
        default=None,
        description="Evaluation time in epoch milliseconds (informational)",
    )

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "key": "billboard-4821",
                "anonymous": False,
                "billboardCode": "4821",
                "timestamp": 1700000000000,
            },
        },
    )

    @model_validator(mode="after")
    def check_anonymous(self) -> EvaluationContext:
        if self.anonymous != (self.billboard_code is None):
            msg = "anonymous must be true exactly when billboardCode is absent"
            raise ValueError(msg)
        return self

    @classmethod
    def default(cls) -> EvaluationContext:
        """Canonical context used when a request carries none."""
        return cls(key=DEFAULT_CONTEXT_KEY, anonymous=True)

    @classmethod
    def for_code(cls, code: str | None, timestamp: int | None = None) -> EvaluationContext:
        """Build the context a client sends for ``code`` (None when signed out)."""
        if code:
            return cls(
                key=f"billboard-{code}",
                anonymous=False,
                billboard_code=code,
                timestamp=timestamp,
            )
        return cls(key=ANONYMOUS_CLIENT_KEY, anonymous=True, timestamp=timestamp)

    def to_wire(self) -> dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


class FlagSet(BaseModel):
    """Evaluated values for every recognized flag.

    Compared by value. Unknown keys are dropped on the way in, so a FlagSet
    never carries a flag outside ``FlagName``.
    """

    enable_image_uploads: bool = Field(
        default=FLAG_DEFAULTS[FlagName.ENABLE_IMAGE_UPLOADS],
        alias=FlagName.ENABLE_IMAGE_UPLOADS.value,
    )
    theme_selection: bool = Field(
        default=FLAG_DEFAULTS[FlagName.THEME_SELECTION],
        alias=FlagName.THEME_SELECTION.value,
    )
    show_feature_flag_info: bool = Field(
        default=FLAG_DEFAULTS[FlagName.SHOW_FEATURE_FLAG_INFO],
        alias=FlagName.SHOW_FEATURE_FLAG_INFO.value,
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    @classmethod
    def defaults(cls) -> FlagSet:
        return cls()

    @classmethod
    def from_values(cls, values: Mapping[FlagName, bool]) -> FlagSet:
        """Build a FlagSet, filling any missing name with its default."""
        return cls(**{name.attribute: values.get(name, name.default) for name in FlagName})

    def get(self, name: FlagName) -> bool:
        return getattr(self, name.attribute)

    def with_value(self, name: FlagName, value: bool) -> FlagSet:
        return self.model_copy(update={name.attribute: value})

    def to_wire(self) -> dict[str, bool]:
        return self.model_dump(by_alias=True)


class FlagsRequest(BaseModel):
    """Body of ``POST /flags``."""

    context: EvaluationContext | None = None


class TrackRequest(BaseModel):
    """Body of ``POST /track``."""

    event_name: str = Field(min_length=1, max_length=200, alias="eventName")
    context: EvaluationContext | None = None

    model_config = ConfigDict(populate_by_name=True)


class TrackResponse(BaseModel):
    success: bool


class FlagsUpdateMessage(BaseModel):
    """The single message shape sent over the realtime channel."""

    type: Literal["flags_update"] = "flags_update"
    flags: FlagSet

    def to_wire(self) -> dict[str, object]:
        return {"type": self.type, "flags": self.flags.to_wire()}


class FlagWriteRequest(BaseModel):
    """Body of ``PUT /flags/{name}``."""

    value: bool


class FlagDefinition(BaseModel):
    name: FlagName
    default: bool
    label: str | None = None


class FlagVocabularyResponse(BaseModel):
    flags: list[FlagDefinition]


__all__ = [
    "EvaluationContext",
    "FlagDefinition",
    "FlagSet",
    "FlagVocabularyResponse",
    "FlagWriteRequest",
    "FlagsRequest",
    "FlagsUpdateMessage",
    "TrackRequest",
    "TrackResponse",
]
