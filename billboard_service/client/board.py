"""Billboard actions: access codes, posting, theme and session lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import random
from typing import TYPE_CHECKING, Any

from billboard_service.features.flags.models import BILLBOARD_CODE_PATTERN
from billboard_service.infra.logging import log_context

from .api import FlagsApiClient
from .exceptions import BillboardInputError, InvalidAccessCodeError, InvalidPostError
from .models import Post, PostType, Theme
from .reconciler import UIReconciler
from .session import ClientSession, now_ms
from .storage import CODE_KEY, THEME_KEY, ContentStore, LocalStorage
from .sync import SyncAgent

if TYPE_CHECKING:
    from collections.abc import Callable

    from billboard_service.core.settings.client import ClientSettings

    from .reconciler import NoticeHandler, UIState
    from .sync import ChannelOpener

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a user action; ``message`` is what the user sees."""

    ok: bool
    message: str = ""
    value: Any = None

    @classmethod
    def failed(cls, error: BillboardInputError) -> ActionResult:
        return cls(ok=False, message=str(error))


def validate_code(code: str) -> str:
    """Return the stripped code or raise ``InvalidAccessCodeError``."""
    candidate = code.strip()
    if not BILLBOARD_CODE_PATTERN.fullmatch(candidate):
        raise InvalidAccessCodeError(code)
    return candidate


def random_code() -> str:
    return str(random.randint(1000, 9999))


class BillboardApp:
    """Client application: one session, one content store, one sync agent.

    Example:
        app = BillboardApp(api, LocalStorage(path), ws_url="ws://localhost:3000/ws")
        await app.start()
        await app.authenticate("4821")
        await app.post("text", "Hi", "Hello")
        app.load_content()
    """

    def __init__(
        self,
        api: FlagsApiClient,
        storage: LocalStorage,
        *,
        ws_url: str,
        reconnect_delay: float = 3.0,
        poll_interval: float = 5.0,
        channel_opener: ChannelOpener | None = None,
        notify: NoticeHandler | None = None,
        code_generator: Callable[[], str] = random_code,
    ) -> None:
        self.api = api
        self.storage = storage
        self.session = ClientSession()
        self.content = ContentStore(storage)
        self.reconciler = UIReconciler(notify=notify)
        self.sync = SyncAgent(
            self.session,
            api,
            self.reconciler,
            ws_url=ws_url,
            reconnect_delay=reconnect_delay,
            poll_interval=poll_interval,
            channel_opener=channel_opener,
        )
        self._code_generator = code_generator

    @classmethod
    def from_settings(cls, settings: ClientSettings, notify: NoticeHandler | None = None) -> BillboardApp:
        return cls(
            FlagsApiClient.from_settings(settings),
            LocalStorage(settings.storage_path),
            ws_url=settings.ws_url,
            reconnect_delay=settings.reconnect_delay,
            poll_interval=settings.poll_interval,
            notify=notify,
        )

    @property
    def saved_code(self) -> str | None:
        """Last-used code, for pre-filling the code field."""
        return self.storage.get(CODE_KEY)

    @property
    def ui_state(self) -> UIState:
        return self.reconciler.apply(self.session.flags, self.session.content_type)

    async def start(self) -> None:
        """Restore theme, load initial flags and start the sync agent."""
        self.apply_theme(self.storage.get(THEME_KEY))
        await self.sync.refresh()
        await self.sync.start()
        await self._track("app_initialized")

    async def close(self) -> None:
        await self.sync.stop()
        await self.api.close()

    async def authenticate(self, code: str) -> ActionResult:
        try:
            code = validate_code(code)
        except InvalidAccessCodeError as e:
            return ActionResult.failed(e)

        created = self.content.ensure_board(code)
        self.storage.set(CODE_KEY, code)
        self.session.billboard_code = code
        with log_context(billboard_code=code):
            logger.info("Billboard opened", extra={"created": created})
            await self.sync.refresh()
            await self._track("user_authenticated")
        return ActionResult(ok=True, message=f"Billboard {code}", value=self.load_content())

    def resume(self) -> bool:
        """Re-open the last-used board without an authentication event."""
        code = self.saved_code
        if not code or not BILLBOARD_CODE_PATTERN.fullmatch(code):
            return False
        self.content.ensure_board(code)
        self.session.billboard_code = code
        return True

    async def generate_new_code(self) -> ActionResult:
        code = self._code_generator()
        self.storage.set(CODE_KEY, code)
        self.session.billboard_code = code
        await self.sync.refresh()
        return ActionResult(ok=True, message=f"New billboard code: {code}", value=code)

    def load_content(self) -> list[Post]:
        code = self.session.billboard_code
        return self.content.posts(code) if code else []

    async def post(
        self,
        content_type: str | PostType,
        title: str,
        content: str,
        image_url: str | None = None,
    ) -> ActionResult:
        try:
            code, post = self._build_post(content_type, title, content, image_url)
        except BillboardInputError as e:
            return ActionResult.failed(e)

        self.content.append(code, post)
        with log_context(billboard_code=code):
            logger.info("Content posted", extra={"content_type": post.type.value})
            await self._track("content_posted")
        return ActionResult(ok=True, message="Content posted successfully!", value=post)

    async def logout(self, *, forget: bool = False) -> ActionResult:
        """Leave the active board.

        Args:
            forget: Also drop the last-used code from storage.
        """
        self.session.billboard_code = None
        if forget:
            self.storage.remove(CODE_KEY)
        await self.sync.refresh()
        await self._track("user_logged_out")
        return ActionResult(ok=True, message="Logged out")

    def apply_theme(self, theme: str | None) -> Theme:
        selected = Theme.parse(theme)
        self.session.theme = selected
        self.storage.set(THEME_KEY, selected.value)
        return selected

    def select_content_type(self, content_type: str | PostType) -> UIState:
        """Change the form selection, reverting the image kind when disabled."""
        state = self.reconciler.select(self.session.flags, PostType(content_type))
        self.session.content_type = state.content_type
        return state

    def _build_post(
        self,
        content_type: str | PostType,
        title: str,
        content: str,
        image_url: str | None,
    ) -> tuple[str, Post]:
        """Validate form input; returns the active code and the new post."""
        code = self.session.billboard_code
        if code is None:
            raise InvalidPostError("Enter a billboard code first")
        try:
            kind = PostType(content_type)
        except ValueError:
            raise InvalidPostError(f"Unknown content type: {content_type}") from None

        title, content = title.strip(), content.strip()
        image_url = image_url.strip() if image_url else None
        if not title or not content:
            raise InvalidPostError("Please fill in title and content")
        if kind.is_image:
            if not self.session.flags.enable_image_uploads:
                raise InvalidPostError("Image uploads are disabled")
            if not image_url:
                raise InvalidPostError("Please provide an image URL for picture posts")

        return code, Post(type=kind, title=title, content=content, image_url=image_url, timestamp=now_ms())

    async def _track(self, event_name: str) -> None:
        result = await self.api.track(event_name, self.session.build_context())
        if not result.ok:
            logger.debug("Tracking skipped", extra={"event_name": event_name})
