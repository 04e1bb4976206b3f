"""Client-side user-input errors.

These describe input the user can fix. Board actions turn them into a failed
``ActionResult``; they are never logged as system errors.
"""

from __future__ import annotations


class BillboardInputError(ValueError):
    """Base class for rejected user input."""


class InvalidAccessCodeError(BillboardInputError):
    """The billboard code is not exactly four digits."""

    def __init__(self, code: str) -> None:
        super().__init__("Please enter a valid 4-digit code")
        self.code = code


class InvalidPostError(BillboardInputError):
    """A post is missing required fields or uses a disabled content type."""
