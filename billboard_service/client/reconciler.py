"""UI reconciliation.

``reconcile`` is a pure function of the current FlagSet and form selection.
``UIReconciler`` wraps it, remembers the last inputs, and emits notices only
on transitions, so re-running it with unchanged inputs is a no-op.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import StrEnum
import logging

from billboard_service.features.flags.models import FLAG_LABELS
from billboard_service.features.flags.schemas import FlagSet

from .models import DEFAULT_CONTENT_TYPE, PostType

logger = logging.getLogger(__name__)

NO_ACTIVE_FLAGS = "No active flags"


class NoticeKind(StrEnum):
    IMAGE_UPLOADS_DISABLED = "image_uploads_disabled"
    FLAGS_UPDATED = "flags_updated"


@dataclass(frozen=True)
class Notice:
    """A one-time message for the user."""

    kind: NoticeKind
    message: str


IMAGE_UPLOADS_DISABLED_NOTICE = Notice(
    NoticeKind.IMAGE_UPLOADS_DISABLED,
    f"Image uploads disabled - switched to {DEFAULT_CONTENT_TYPE.value.capitalize()}",
)
FLAGS_UPDATED_NOTICE = Notice(NoticeKind.FLAGS_UPDATED, "Feature flags updated!")

NoticeHandler = Callable[[Notice], None]


@dataclass(frozen=True)
class UIState:
    """Visible affordances derived from flags and the form selection."""

    offered_content_types: tuple[PostType, ...]
    content_type: PostType
    image_field_visible: bool
    flag_info_visible: bool
    theme_selector_visible: bool
    flag_status: str
    # The requested selection was the image kind and had to be replaced
    selection_forced: bool = False


def flag_status_line(flags: FlagSet) -> str:
    """``"Image Uploads: Enabled, Theme Selection: Enabled"`` style summary."""
    active = [f"{label}: Enabled" for name, label in FLAG_LABELS.items() if flags.get(name)]
    return ", ".join(active) if active else NO_ACTIVE_FLAGS


def guard_selection(flags: FlagSet, requested: PostType) -> tuple[PostType, bool]:
    """Replace the image kind with the default kind while uploads are disabled.

    Returns:
        The effective selection and whether it was forced.
    """
    if requested.is_image and not flags.enable_image_uploads:
        return DEFAULT_CONTENT_TYPE, True
    return requested, False


def reconcile(flags: FlagSet, content_type: PostType) -> UIState:
    selection, forced = guard_selection(flags, content_type)
    offered = tuple(
        kind for kind in PostType if flags.enable_image_uploads or not kind.is_image
    )
    return UIState(
        offered_content_types=offered,
        content_type=selection,
        image_field_visible=selection.is_image and flags.enable_image_uploads,
        flag_info_visible=flags.show_feature_flag_info,
        theme_selector_visible=flags.theme_selection,
        flag_status=flag_status_line(flags),
        selection_forced=forced,
    )


class UIReconciler:
    """Applies ``reconcile`` and reports transitions.

    Example:
        ui = UIReconciler(notify=print)
        state = ui.apply(session.flags, session.content_type)
        session.content_type = state.content_type
    """

    def __init__(self, notify: NoticeHandler | None = None) -> None:
        self._notify = notify
        self._inputs: set[tuple[FlagSet, PostType]] = set()
        self.state: UIState | None = None
        self.notices: list[Notice] = []

    def apply(self, flags: FlagSet, content_type: PostType) -> UIState:
        """Reconcile; identical inputs to the previous call change nothing."""
        if self.state is not None and (flags, content_type) in self._inputs:
            return self.state

        previous = self.state
        state = reconcile(flags, content_type)
        # Both the requested and the effective selection map to this state
        self._inputs = {(flags, content_type), (flags, state.content_type)}
        self.state = state

        if state.selection_forced:
            self._emit(IMAGE_UPLOADS_DISABLED_NOTICE)
        if previous is None or previous != state:
            logger.debug(
                "UI reconciled",
                extra={
                    "content_type": state.content_type.value,
                    "image_field_visible": state.image_field_visible,
                    "flag_status": state.flag_status,
                },
            )
        return state

    def select(self, flags: FlagSet, requested: PostType) -> UIState:
        """Handle a user change of the content-type control.

        Every attempt to pick the image kind while uploads are disabled is
        reverted and announced, even when the board already shows the default.
        """
        selection, forced = guard_selection(flags, requested)
        state = self.apply(flags, selection)
        if not forced:
            return state
        self._emit(IMAGE_UPLOADS_DISABLED_NOTICE)
        return replace(state, selection_forced=True)

    def announce_flags_update(self, flags: FlagSet) -> bool:
        """Emit the flags-updated notice if the flag info flag is on."""
        if not flags.show_feature_flag_info:
            return False
        self._emit(FLAGS_UPDATED_NOTICE)
        return True

    def _emit(self, notice: Notice) -> None:
        self.notices.append(notice)
        if self._notify is not None:
            self._notify(notice)
