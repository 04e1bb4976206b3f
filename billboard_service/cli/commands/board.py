"""Billboard commands operating on the local content store."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import sys

import click

from billboard_service.cli.utils import coro, error, header, info, print_post, success, warning
from billboard_service.client import BillboardApp, Notice, PostType, Theme
from billboard_service.core.settings import get_client_settings


def _print_notice(notice: Notice) -> None:
    warning(notice.message)


@asynccontextmanager
async def open_board() -> AsyncIterator[BillboardApp]:
    """BillboardApp without the sync agent; one-shot requests only."""
    app = BillboardApp.from_settings(get_client_settings(), notify=_print_notice)
    try:
        yield app
    finally:
        await app.api.close()


def _require_board(app: BillboardApp) -> str:
    if not app.resume():
        error("No billboard code yet. Run 'billboard board login CODE' or 'billboard board new-code'.")
        sys.exit(1)
    return app.session.billboard_code or ""


@click.group(name="board")
def board() -> None:
    """Work with billboards stored on this machine."""


@board.command()
@click.argument("code")
@coro
async def login(code: str) -> None:
    """Open the billboard for a 4-digit CODE, creating it on first use."""
    async with open_board() as app:
        result = await app.authenticate(code)
        if not result.ok:
            error(result.message)
            sys.exit(1)
        success(result.message)
        info(f"{len(result.value)} post(s)")


@board.command(name="new-code")
@coro
async def new_code() -> None:
    """Generate a random billboard code and make it the active one."""
    async with open_board() as app:
        result = await app.generate_new_code()
        success(result.message)


@board.command()
@click.option(
    "--type",
    "content_type",
    type=click.Choice([kind.value for kind in PostType]),
    default=PostType.TEXT.value,
    show_default=True,
)
@click.option("--title", required=True)
@click.option("--content", required=True)
@click.option("--image-url", default=None, help="Required for picture posts")
@coro
async def post(content_type: str, title: str, content: str, image_url: str | None) -> None:
    """Append a post to the active billboard."""
    async with open_board() as app:
        _require_board(app)
        # Picture posts depend on the current image-upload flag
        await app.sync.refresh()
        result = await app.post(content_type, title, content, image_url)
        if not result.ok:
            error(result.message)
            sys.exit(1)
        success(result.message)


@board.command(name="list")
@coro
async def list_posts() -> None:
    """Print the active billboard's posts in the order they were added."""
    async with open_board() as app:
        code = _require_board(app)
        posts = app.load_content()
        header(f"Billboard {code}")
        if not posts:
            info("No posts yet")
        for item in posts:
            print_post(item)


@board.command()
@coro
async def logout() -> None:
    """Leave the active billboard and forget its code."""
    async with open_board() as app:
        result = await app.logout(forget=True)
        success(result.message)


@board.command()
@click.argument("name", type=click.Choice([theme.value for theme in Theme]))
@coro
async def theme(name: str) -> None:
    """Select the light or dark theme."""
    async with open_board() as app:
        selected = app.apply_theme(name)
        success(f"Theme: {selected.value}")
