"""Tests for UI reconciliation."""
from __future__ import annotations

import pytest

from billboard_service.client.models import PostType
from billboard_service.client.reconciler import (
    FLAGS_UPDATED_NOTICE,
    IMAGE_UPLOADS_DISABLED_NOTICE,
    NoticeKind,
    UIReconciler,
    flag_status_line,
    reconcile,
)
from billboard_service.features.flags.schemas import FlagSet

IMAGES_ON = FlagSet.model_validate({"enable-image-uploads": True})
ALL_ON = FlagSet.model_validate(
    {"enable-image-uploads": True, "theme-selection": True, "show-feature-flag-info": True}
)
ALL_OFF = FlagSet.model_validate(
    {"enable-image-uploads": False, "theme-selection": False, "show-feature-flag-info": False}
)


class TestReconcile:
    def test_defaults_hide_image_kind(self):
        state = reconcile(FlagSet.defaults(), PostType.PROMPT)

        assert PostType.PICTURE not in state.offered_content_types
        assert state.image_field_visible is False
        assert state.flag_info_visible is True
        assert state.theme_selector_visible is False

    def test_image_uploads_enabled(self):
        state = reconcile(IMAGES_ON, PostType.PICTURE)

        assert state.offered_content_types == (PostType.TEXT, PostType.PROMPT, PostType.PICTURE)
        assert state.content_type is PostType.PICTURE
        assert state.image_field_visible is True
        assert state.selection_forced is False

    def test_image_field_only_for_picture_selection(self):
        assert reconcile(IMAGES_ON, PostType.TEXT).image_field_visible is False

    def test_picture_selection_forced_when_disabled(self):
        state = reconcile(FlagSet.defaults(), PostType.PICTURE)

        assert state.content_type is PostType.PROMPT
        assert state.selection_forced is True
        assert state.image_field_visible is False

    def test_theme_selector_follows_flag(self):
        assert reconcile(ALL_ON, PostType.TEXT).theme_selector_visible is True
        assert reconcile(ALL_OFF, PostType.TEXT).theme_selector_visible is False


class TestFlagStatusLine:
    @pytest.mark.parametrize(
        ("flags", "expected"),
        [
            (ALL_ON, "Image Uploads: Enabled, Theme Selection: Enabled"),
            (IMAGES_ON, "Image Uploads: Enabled"),
            (FlagSet.model_validate({"theme-selection": True}), "Theme Selection: Enabled"),
            (FlagSet.defaults(), "No active flags"),
        ],
    )
    def test_status_line(self, flags, expected):
        assert flag_status_line(flags) == expected


class TestUIReconciler:
    def test_identical_inputs_are_a_no_op(self):
        ui = UIReconciler()

        first = ui.apply(IMAGES_ON, PostType.PICTURE)
        second = ui.apply(IMAGES_ON, PostType.PICTURE)

        assert first is second
        assert ui.notices == []

    def test_disabling_uploads_forces_selection_with_one_notice(self):
        seen = []
        ui = UIReconciler(notify=seen.append)
        ui.apply(IMAGES_ON, PostType.PICTURE)

        state = ui.apply(FlagSet.defaults(), PostType.PICTURE)
        ui.apply(FlagSet.defaults(), PostType.PICTURE)
        ui.apply(FlagSet.defaults(), state.content_type)

        assert state.content_type is PostType.PROMPT
        assert state.image_field_visible is False
        assert PostType.PICTURE not in state.offered_content_types
        assert seen == [IMAGE_UPLOADS_DISABLED_NOTICE]
        assert IMAGE_UPLOADS_DISABLED_NOTICE.message == "Image uploads disabled - switched to Prompt"

    def test_no_notice_when_selection_was_not_picture(self):
        ui = UIReconciler()
        ui.apply(IMAGES_ON, PostType.TEXT)

        state = ui.apply(FlagSet.defaults(), PostType.TEXT)

        assert state.content_type is PostType.TEXT
        assert ui.notices == []

    def test_user_selecting_picture_while_disabled(self):
        ui = UIReconciler()
        ui.apply(FlagSet.defaults(), PostType.PROMPT)

        state = ui.select(FlagSet.defaults(), PostType.PICTURE)

        assert state.content_type is PostType.PROMPT
        assert [notice.kind for notice in ui.notices] == [NoticeKind.IMAGE_UPLOADS_DISABLED]

    def test_flags_updated_notice_requires_flag_info(self):
        ui = UIReconciler()

        assert ui.announce_flags_update(ALL_OFF) is False
        assert ui.announce_flags_update(ALL_ON) is True
        assert ui.notices == [FLAGS_UPDATED_NOTICE]

    def test_each_picture_selection_while_disabled_is_announced(self):
        seen = []
        ui = UIReconciler(notify=seen.append)
        ui.apply(FlagSet.defaults(), PostType.PROMPT)

        first = ui.select(FlagSet.defaults(), PostType.PICTURE)
        second = ui.select(FlagSet.defaults(), PostType.PICTURE)

        assert first.content_type is second.content_type is PostType.PROMPT
        assert second.selection_forced is True
        assert seen == [IMAGE_UPLOADS_DISABLED_NOTICE, IMAGE_UPLOADS_DISABLED_NOTICE]

    def test_selection_does_not_repeat_flag_driven_notice(self):
        ui = UIReconciler()
        ui.apply(IMAGES_ON, PostType.PICTURE)

        ui.select(IMAGES_ON, PostType.TEXT)
        ui.apply(IMAGES_ON, PostType.TEXT)

        assert ui.notices == []
