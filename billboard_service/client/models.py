"""Client data model: posts, content types and themes."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PostType(StrEnum):
    TEXT = "text"
    PROMPT = "prompt"
    PICTURE = "picture"

    @property
    def is_image(self) -> bool:
        return self is PostType.PICTURE


# Selection forced onto the form when the image kind is unavailable
DEFAULT_CONTENT_TYPE = PostType.PROMPT


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"

    @classmethod
    def parse(cls, value: str | None) -> Theme:
        """Anything other than ``dark`` is the light theme."""
        return cls.DARK if value == cls.DARK.value else cls.LIGHT


class Post(BaseModel):
    """One entry on a billboard. Immutable once appended.

    ``imageUrl`` is kept only for picture posts; ``timestamp`` is the
    creation time in epoch milliseconds.
    """

    type: PostType
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)
    image_url: str | None = Field(default=None, alias="imageUrl")
    timestamp: int = Field(ge=0)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_image_for_text_kinds(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("type") != PostType.PICTURE.value:
            return {k: v for k, v in data.items() if k not in ("imageUrl", "image_url")}
        return data

    @model_validator(mode="after")
    def require_image_for_picture(self) -> Post:
        if self.type.is_image and not self.image_url:
            msg = "picture posts need an imageUrl"
            raise ValueError(msg)
        return self

    def to_storage(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
