"""End-to-end board flows against the fake flag server."""
from __future__ import annotations

import pytest

from billboard_service.client.board import BillboardApp, validate_code
from billboard_service.client.exceptions import InvalidAccessCodeError
from billboard_service.client.models import PostType, Theme
from billboard_service.client.storage import CODE_KEY, THEME_KEY
from billboard_service.features.flags.schemas import FlagSet

IMAGES_ON = FlagSet.model_validate({"enable-image-uploads": True, "theme-selection": True})


@pytest.fixture
async def board(api, storage, make_opener):
    app = BillboardApp(
        api,
        storage,
        ws_url="ws://billboard.test/ws",
        poll_interval=60,
        channel_opener=make_opener(),
        code_generator=lambda: "5555",
    )
    yield app
    await app.sync.stop()


class TestAccessCode:
    @pytest.mark.parametrize("code", ["4821", " 0042 "])
    def test_valid_codes(self, code):
        assert validate_code(code) == code.strip()

    @pytest.mark.parametrize("code", ["", "123", "12345", "12a4", "４８２１"])
    def test_invalid_codes(self, code):
        with pytest.raises(InvalidAccessCodeError, match="Please enter a valid 4-digit code"):
            validate_code(code)

    async def test_invalid_code_leaves_session_alone(self, board, flag_server):
        result = await board.authenticate("12")

        assert not result.ok
        assert result.message == "Please enter a valid 4-digit code"
        assert board.session.billboard_code is None
        assert flag_server.requests == []


class TestSessionFlow:
    async def test_start(self, board, flag_server, storage):
        storage.set(THEME_KEY, "dark")

        await board.start()

        assert board.session.theme is Theme.DARK
        assert board.sync.state.value == "polling"
        assert flag_server.events() == ["app_initialized"]

    async def test_first_visit_to_a_board(self, board, flag_server, storage):
        flag_server.flags = IMAGES_ON

        result = await board.authenticate("4821")

        assert result.ok
        assert result.value == []
        assert storage.get(CODE_KEY) == "4821"
        assert board.content.has_board("4821")
        assert board.session.flags == IMAGES_ON
        context = flag_server.bodies("/api/flags")[-1]["context"]
        assert context["key"] == "billboard-4821"
        assert context["anonymous"] is False
        assert flag_server.events() == ["user_authenticated"]

    async def test_post_then_reload(self, board, flag_server):
        await board.authenticate("4821")

        posted = await board.post("text", "Hi", "Hello")

        assert posted.ok
        assert posted.message == "Content posted successfully!"
        assert [post.title for post in board.load_content()] == ["Hi"]
        assert flag_server.events()[-1] == "content_posted"

        # A later visit sees the same posts
        again = await board.authenticate("4821")
        assert [post.content for post in again.value] == ["Hello"]

    async def test_picture_post_needs_flag_and_url(self, board, flag_server):
        await board.authenticate("4821")

        disabled = await board.post(PostType.PICTURE, "Pic", "Caption", "https://example.com/a.png")
        assert disabled.message == "Image uploads are disabled"

        flag_server.flags = IMAGES_ON
        await board.sync.refresh()

        missing = await board.post(PostType.PICTURE, "Pic", "Caption", "  ")
        assert missing.message == "Please provide an image URL for picture posts"

        ok = await board.post(PostType.PICTURE, "Pic", "Caption", "https://example.com/a.png")
        assert ok.ok
        assert ok.value.image_url == "https://example.com/a.png"

    @pytest.mark.parametrize(
        ("title", "content", "message"),
        [
            ("", "Hello", "Please fill in title and content"),
            ("Hi", "   ", "Please fill in title and content"),
        ],
    )
    async def test_incomplete_post(self, board, title, content, message):
        await board.authenticate("4821")

        result = await board.post("text", title, content)

        assert result.message == message
        assert board.load_content() == []

    async def test_post_requires_code(self, board):
        result = await board.post("text", "Hi", "Hello")

        assert result.message == "Enter a billboard code first"

    async def test_generate_new_code(self, board, storage):
        result = await board.generate_new_code()

        assert result.value == "5555"
        assert board.session.billboard_code == "5555"
        assert storage.get(CODE_KEY) == "5555"

    async def test_logout(self, board, flag_server, storage):
        await board.authenticate("4821")

        await board.logout()

        assert board.session.billboard_code is None
        assert board.saved_code == "4821"
        assert flag_server.bodies("/api/flags")[-1]["context"]["anonymous"] is True
        assert flag_server.events()[-1] == "user_logged_out"

        await board.logout(forget=True)
        assert storage.get(CODE_KEY) is None

    async def test_resume(self, board, storage):
        storage.set(CODE_KEY, "4821")

        assert board.resume() is True
        assert board.session.billboard_code == "4821"

    async def test_resume_ignores_bad_saved_code(self, board, storage):
        storage.set(CODE_KEY, "48")

        assert board.resume() is False


class TestFormControls:
    async def test_select_picture_while_disabled(self, board):
        state = board.select_content_type("picture")

        assert state.content_type is PostType.PROMPT
        assert board.session.content_type is PostType.PROMPT

    async def test_disabling_uploads_reverts_selection(self, board, flag_server):
        flag_server.flags = IMAGES_ON
        await board.sync.refresh()
        board.select_content_type("picture")

        flag_server.flags = FlagSet.defaults()
        assert await board.sync.poll_once() is True

        assert board.session.content_type is PostType.PROMPT
        assert board.ui_state.image_field_visible is False

    async def test_apply_theme_persists(self, board, storage):
        assert board.apply_theme("dark") is Theme.DARK
        assert storage.get(THEME_KEY) == "dark"
        assert board.apply_theme("sepia") is Theme.LIGHT

    async def test_repeated_picture_selection_notifies_each_time(self, api, storage, make_opener):
        seen = []
        app = BillboardApp(api, storage, ws_url="ws://billboard.test/ws", channel_opener=make_opener(), notify=seen.append)

        app.select_content_type("picture")
        app.select_content_type("picture")

        assert len(seen) == 2
        assert app.session.content_type is PostType.PROMPT
